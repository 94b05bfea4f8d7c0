"""Complex-number accessors and polar conversions."""

from __future__ import annotations

import math

from ..context import Context
from ..errors import EvalError, ErrorKind, bound_args, wrong_argument_type
from ..values import Complex, Float, List, Value
from . import kernels
from .common import build_table, require_int, to_float


def _complex_arg(value: Value) -> complex:
    if not isinstance(value, Complex):
        raise wrong_argument_type(f"Argument '{value}' is of the wrong type")
    return value.value


def re(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(_complex_arg(args[0]).real)


def im(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(_complex_arg(args[0]).imag)


def conj(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Complex(_complex_arg(args[0]).conjugate())


def arg(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(kernels.complex_unary("angle", _complex_arg(args[0])).real)


def norm(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(kernels.complex_unary("abs", _complex_arg(args[0])).real)


def norm_sq(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    z = _complex_arg(args[0])
    return Float(z.real * z.real + z.imag * z.imag)


def normalize(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    z = _complex_arg(args[0])
    r = abs(z)
    if r == 0:
        return Complex(complex(math.nan, math.nan))
    return Complex(z / r)


def to_polar(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    z = _complex_arg(args[0])
    return List((Float(abs(z)), Float(math.atan2(z.imag, z.real))))


def from_polar(args: list[Value]) -> Value:
    """``from_polar(r, theta)`` or ``from_polar((r, theta))``."""
    bound_args(len(args), 1, 2)
    if len(args) == 1:
        pair = args[0]
        if not isinstance(pair, List):
            raise wrong_argument_type(f"Argument '{pair}' is of the wrong type")
        if len(pair) != 2:
            raise EvalError(ErrorKind.LIST_INDEX_OUT_OF_BOUNDS, "List index 1 out of bounds")
        r, theta = pair.items
    else:
        r, theta = args
    r_f = to_float(r)
    t_f = to_float(theta)
    return Complex(complex(r_f * math.cos(t_f), r_f * math.sin(t_f)))


def all_roots(args: list[Value]) -> Value:
    """All ``n`` complex ``n``-th roots of a complex number."""
    bound_args(len(args), 2)
    z = _complex_arg(args[0])
    n = require_int(args[1])
    if n <= 0:
        return List(())
    r = abs(z) ** (1.0 / n)
    theta = math.atan2(z.imag, z.real)
    roots = []
    for k in range(n):
        t = (theta + k * math.tau) / n
        roots.append(Complex(complex(r * math.cos(t), r * math.sin(t))))
    return List(tuple(roots))


def table() -> Context:
    return build_table(
        {
            "re": re,
            "im": im,
            "conj": conj,
            "arg": arg,
            "norm": norm,
            "norm_sq": norm_sq,
            "normalize": normalize,
            "to_polar": to_polar,
            "from_polar": from_polar,
            "all_roots": all_roots,
        }
    )
