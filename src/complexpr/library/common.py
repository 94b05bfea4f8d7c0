"""Shared argument coercions and table assembly for library modules."""

from __future__ import annotations

from typing import Callable, Mapping

from ..context import Context
from ..errors import wrong_argument_type
from ..values import Complex, Float, Integer, Ratio, Value

NativeFn = Callable[[list[Value]], Value]


def to_float(value: Value) -> float:
    if isinstance(value, (Integer, Float, Ratio)):
        return float(value.value)
    raise wrong_argument_type(f"Argument '{value}' is of the wrong type")


def to_float_or_complex(value: Value) -> float | complex:
    if isinstance(value, Complex):
        return value.value
    return to_float(value)


def wrap_number(x: float | complex) -> Value:
    if isinstance(x, complex):
        return Complex(x)
    return Float(x)


def require_int(value: Value) -> int:
    if not isinstance(value, Integer):
        raise wrong_argument_type(f"Argument '{value}' is of the wrong type")
    return value.value


def build_table(functions: Mapping[str, NativeFn], constants: Mapping[str, Value] | None = None) -> Context:
    ctx = Context()
    for name, fn in functions.items():
        ctx.insert_function(name, fn)
    if constants:
        for name, value in constants.items():
            ctx[name] = value
    return ctx
