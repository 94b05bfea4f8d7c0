"""Type inspection and conversion functions."""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Callable, Final

from ..context import Context
from ..errors import bound_args, invalid_argument_value, wrong_argument_type
from ..operators import checked_int, checked_ratio
from ..values import (
    FALSE,
    TRUE,
    Bool,
    Complex,
    Float,
    Integer,
    List,
    Ratio,
    Str,
    Value,
    Void,
    is_callable_value,
    is_infinite,
    is_nan,
    repr_text,
    to_string,
)
from .common import build_table

# Largest denominator used when approximating a float by a ratio.
RATIO_MAX_DENOMINATOR: Final[int] = 1 << 32


def _predicate(test: Callable[[Value], bool]):
    def fn(args: list[Value]) -> Value:
        bound_args(len(args), 1)
        return TRUE if test(args[0]) else FALSE

    return fn


def _is_normal(value: Value) -> bool:
    if isinstance(value, (Float, Complex)):
        return not is_nan(value) and not is_infinite(value)
    return isinstance(value, (Integer, Ratio))


def typeof(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Str(args[0].type_name)


def to_int(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, Integer):
        return x
    if isinstance(x, Float):
        if not math.isfinite(x.value):
            raise invalid_argument_value(f"Argument '{x}' has an invalid value")
        return checked_int(math.trunc(x.value))
    if isinstance(x, Ratio):
        return checked_int(math.floor(x.value))
    raise wrong_argument_type(f"Argument '{x}' is of the wrong type")


def to_ratio(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, Ratio):
        return x
    if isinstance(x, Integer):
        return Ratio(Fraction(x.value))
    if isinstance(x, Float):
        if not math.isfinite(x.value):
            raise invalid_argument_value(f"Argument '{x}' has an invalid value")
        return checked_ratio(Fraction(x.value).limit_denominator(RATIO_MAX_DENOMINATOR))
    raise wrong_argument_type(f"Argument '{x}' is of the wrong type")


def to_str(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Str(to_string(args[0]))


def to_repr(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Str(repr_text(args[0]))


def table() -> Context:
    return build_table(
        {
            "typeof": typeof,
            "is_int": _predicate(lambda v: isinstance(v, Integer)),
            "is_float": _predicate(lambda v: isinstance(v, Float)),
            "is_ratio": _predicate(lambda v: isinstance(v, Ratio)),
            "is_complex": _predicate(lambda v: isinstance(v, Complex)),
            "is_bool": _predicate(lambda v: isinstance(v, Bool)),
            "is_str": _predicate(lambda v: isinstance(v, Str)),
            "is_list": _predicate(lambda v: isinstance(v, List)),
            "is_callable": _predicate(is_callable_value),
            "is_void": _predicate(lambda v: isinstance(v, Void)),
            "is_infinite": _predicate(is_infinite),
            "is_nan": _predicate(is_nan),
            "is_normal": _predicate(_is_normal),
            "to_int": to_int,
            "to_ratio": to_ratio,
            "to_str": to_str,
            "to_repr": to_repr,
        }
    )
