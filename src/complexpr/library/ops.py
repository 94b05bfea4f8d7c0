"""Operator functions: folds of the arithmetic operators plus ``cmp``."""

from __future__ import annotations

from functools import reduce

from ..context import Context
from ..errors import bound_args
from ..operators import arithmetic
from ..values import VOID, Integer, Value, compare
from .common import build_table


def _left_fold(op: str, empty: int):
    def fold(args: list[Value]) -> Value:
        if not args:
            return Integer(empty)
        return reduce(lambda acc, item: arithmetic(op, acc, item), args[1:], args[0])

    return fold


def pow_fold(args: list[Value]) -> Value:
    """Right-associative power: ``pow(a, b, c)`` is ``a^(b^c)``."""
    if not args:
        return Integer(1)
    result = args[-1]
    for arg in reversed(args[:-1]):
        result = arithmetic("^", arg, result)
    return result


def cmp(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    order = compare(args[0], args[1])
    if order is None:
        return VOID
    return Integer(order)


def table() -> Context:
    return build_table(
        {
            "add": _left_fold("+", 0),
            "sub": _left_fold("-", 0),
            "mul": _left_fold("*", 1),
            "div": _left_fold("/", 1),
            "frac": _left_fold("//", 1),
            "mod": _left_fold("%", 1),
            "pow": pow_fold,
            "cmp": cmp,
        }
    )
