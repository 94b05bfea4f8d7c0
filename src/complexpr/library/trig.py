"""Trigonometric and hyperbolic functions over reals and complex numbers."""

from __future__ import annotations

from ..context import Context
from ..errors import bound_args
from ..values import Float, Value
from . import kernels
from .common import build_table, to_float, to_float_or_complex, wrap_number

_NAMES = (
    "sin",
    "cos",
    "tan",
    "sinh",
    "cosh",
    "tanh",
    "asin",
    "acos",
    "atan",
    "asinh",
    "acosh",
    "atanh",
)


def _trig_function(name: str):
    def fn(args: list[Value]) -> Value:
        bound_args(len(args), 1)
        x = to_float_or_complex(args[0])
        if isinstance(x, complex):
            return wrap_number(kernels.complex_unary(name, x))
        return wrap_number(kernels.real_unary(name, x))

    fn.__name__ = name
    return fn


def atan2(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    return Float(kernels.real_binary("atan2", to_float(args[0]), to_float(args[1])))


def table() -> Context:
    functions = {name: _trig_function(name) for name in _NAMES}
    functions["atan2"] = atan2
    return build_table(functions)
