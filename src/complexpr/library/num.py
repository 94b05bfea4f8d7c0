"""Numeric functions and constants.

Real-domain failures (``sqrt(-1)``, ``ln(-2)``) produce NaN rather than
errors; pass a complex argument to get the principal complex result.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Final

from ..context import Context
from ..errors import bound_args, invalid_argument_value, min_args, wrong_argument_type
from ..evaluator import call_value
from ..operators import arithmetic, checked_int, checked_ratio, float_div
from ..values import Complex, Float, Integer, List, Ratio, Value, compare, is_nan
from . import kernels
from .common import build_table, require_int, to_float, to_float_or_complex, wrap_number

LAMBERT_W_MIN: Final[float] = -1.0 / math.e
_SOLVE_EPSILON: Final[Float] = Float(2.0**-32)
_SOLVE_INV_EPSILON: Final[Float] = Float(2.0**32)
_SOLVE_ITERATIONS: Final[int] = 100
# 10.0 ** 308 is the largest power of ten a float holds.
_FLOAT_DIGITS_MAX: Final[int] = 308
# 10 ** 18 is the largest power of ten below 2 ** 63.
_RATIO_DIGITS_MAX: Final[int] = 18


def _unary_kernel(name: str):
    def fn(args: list[Value]) -> Value:
        bound_args(len(args), 1)
        x = to_float_or_complex(args[0])
        if isinstance(x, complex):
            return wrap_number(kernels.complex_unary(name, x))
        return wrap_number(kernels.real_unary(name, x))

    fn.__name__ = name
    return fn


sqrt = _unary_kernel("sqrt")
exp = _unary_kernel("exp")
ln = _unary_kernel("ln")


def min_(args: list[Value]) -> Value:
    min_args(len(args), 1)
    lowest = args[0]
    for arg in args[1:]:
        if compare(arg, lowest) == -1 or is_nan(lowest):
            lowest = arg
    return lowest


def max_(args: list[Value]) -> Value:
    min_args(len(args), 1)
    highest = args[0]
    for arg in args[1:]:
        if compare(arg, highest) == 1 or is_nan(highest):
            highest = arg
    return highest


def abs_(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, Integer):
        return checked_int(abs(x.value))
    if isinstance(x, Float):
        return Float(abs(x.value))
    if isinstance(x, Ratio):
        return checked_ratio(abs(x.value))
    raise wrong_argument_type(f"Argument '{x}' is of the wrong type")


def root(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    return arithmetic("^", args[0], arithmetic("^", args[1], Float(-1.0)))


def log(args: list[Value]) -> Value:
    bound_args(len(args), 1, 2)
    n = to_float_or_complex(args[0])
    if len(args) == 1:
        if isinstance(n, complex):
            return Complex(kernels.complex_unary("ln", n))
        return Float(kernels.real_unary("ln", n))
    b = to_float_or_complex(args[1])
    if isinstance(n, float) and isinstance(b, float):
        if b == 10.0:
            return Float(kernels.real_unary("log10", n))
        if b == 2.0:
            return Float(kernels.real_unary("log2", n))
        return Float(float_div(kernels.real_unary("ln", n), kernels.real_unary("ln", b)))
    num = kernels.complex_unary("ln", complex(n))
    den = kernels.complex_unary("ln", complex(b))
    if den == 0:
        return Complex(complex(math.nan, math.nan))
    return Complex(num / den)


def signum(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, Integer):
        return Integer((x.value > 0) - (x.value < 0))
    if isinstance(x, Float):
        if math.isnan(x.value):
            return x
        return Float(math.copysign(1.0, x.value))
    if isinstance(x, Ratio):
        return Ratio(Fraction((x.value > 0) - (x.value < 0)))
    raise wrong_argument_type(f"Argument '{x}' is of the wrong type")


def _float_fract(x: float) -> float:
    if not math.isfinite(x):
        return math.nan
    return math.fmod(x, 1.0)


def _float_floor(x: float) -> float:
    return float(math.floor(x)) if math.isfinite(x) else x


def _float_ceil(x: float) -> float:
    return float(math.ceil(x)) if math.isfinite(x) else x


def _round_half_away(x):
    """Round to nearest, ties away from zero; works for float and Fraction."""
    if isinstance(x, float) and not math.isfinite(x):
        return x
    half = Fraction(1, 2) if isinstance(x, Fraction) else 0.5
    r = math.floor(abs(x) + half)
    return -r if x < 0 else r


def _componentwise(name: str, float_fn, ratio_fn):
    def fn(args: list[Value]) -> Value:
        bound_args(len(args), 1)
        x = args[0]
        if isinstance(x, Integer):
            return Integer(0) if name == "fract" else x
        if isinstance(x, Float):
            return Float(float_fn(x.value))
        if isinstance(x, Ratio):
            return Ratio(Fraction(ratio_fn(x.value)))
        if isinstance(x, Complex):
            return Complex(complex(float_fn(x.value.real), float_fn(x.value.imag)))
        raise wrong_argument_type(f"Argument '{x}' is of the wrong type")

    fn.__name__ = name
    return fn


fract = _componentwise("fract", _float_fract, lambda q: q - math.trunc(q))
floor = _componentwise("floor", _float_floor, math.floor)
ceil = _componentwise("ceil", _float_ceil, math.ceil)


def _round_float(x: float, digits: int) -> float:
    if not math.isfinite(x):
        return x
    m = 10.0 ** max(-_FLOAT_DIGITS_MAX, min(_FLOAT_DIGITS_MAX, digits))
    scaled = m * x
    if not math.isfinite(scaled):
        return x
    return float(_round_half_away(scaled)) / m


def round_(args: list[Value]) -> Value:
    bound_args(len(args), 1, 2)
    digits = require_int(args[1]) if len(args) == 2 else 0
    x = args[0]
    if isinstance(x, Integer):
        return x
    if isinstance(x, Float):
        return Float(_round_float(x.value, digits))
    if isinstance(x, Ratio):
        if abs(digits) > _RATIO_DIGITS_MAX:
            raise invalid_argument_value(f"Argument '{digits}' has an invalid value")
        m = Fraction(10) ** digits
        return checked_ratio(Fraction(_round_half_away(x.value * m)) / m)
    if isinstance(x, Complex):
        re = _round_float(x.value.real, digits)
        im = _round_float(x.value.imag, digits)
        return Complex(complex(re, im))
    raise wrong_argument_type(f"Argument '{x}' is of the wrong type")


def gcd(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    return checked_int(math.gcd(require_int(args[0]), require_int(args[1])))


def factors(args: list[Value]) -> Value:
    """Prime factors in ascending order; empty for |n| <= 1."""
    bound_args(len(args), 1)
    n = abs(require_int(args[0]))
    out: list[Value] = []
    if n <= 1:
        return List(())
    while n % 2 == 0:
        out.append(Integer(2))
        n //= 2
    f = 3
    while n > 1:
        if f * f > n:
            out.append(Integer(n))
            break
        if n % f == 0:
            out.append(Integer(f))
            n //= f
        else:
            f += 2
    return List(tuple(out))


def deg2rad(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(math.radians(to_float(args[0])))


def rad2deg(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(math.degrees(to_float(args[0])))


def factorial(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    n = require_int(args[0])
    if n < 0:
        raise invalid_argument_value(f"Argument '{n}' has an invalid value")
    if n > 20:
        raise invalid_argument_value(f"Factorial of {n} is out of the 64-bit range")
    return Integer(math.factorial(n))


def gamma(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    return Float(kernels.gamma(to_float(args[0])))


def lambert_w(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = to_float(args[0])
    if not x >= LAMBERT_W_MIN:
        raise invalid_argument_value(f"Argument '{args[0]}' has an invalid value")
    return Float(kernels.lambert_w(x))


def solve(args: list[Value]) -> Value:
    """Newton's method: ``solve(f, guess)`` with a forward-difference derivative."""
    bound_args(len(args), 2)
    func, result = args
    for _ in range(_SOLVE_ITERATIONS):
        fx = call_value(func, [result])
        if fx == Float(0.0):
            break
        shifted = call_value(func, [arithmetic("+", result, _SOLVE_EPSILON)])
        deriv = arithmetic("*", arithmetic("-", shifted, fx), _SOLVE_INV_EPSILON)
        nxt = arithmetic("-", result, arithmetic("/", fx, deriv))
        if nxt == result:
            break
        result = nxt
    return result


CONSTANTS: Final[dict[str, Value]] = {
    "pi": Float(math.pi),
    "e": Float(math.e),
    "inf": Float(math.inf),
    "neg_inf": Float(-math.inf),
    "nan": Float(math.nan),
}


def table() -> Context:
    return build_table(
        {
            "min": min_,
            "max": max_,
            "abs": abs_,
            "sqrt": sqrt,
            "root": root,
            "exp": exp,
            "log": log,
            "ln": ln,
            "signum": signum,
            "fract": fract,
            "floor": floor,
            "ceil": ceil,
            "round": round_,
            "gcd": gcd,
            "factors": factors,
            "deg2rad": deg2rad,
            "rad2deg": rad2deg,
            "factorial": factorial,
            "solve": solve,
            "gamma": gamma,
            "lambert_w": lambert_w,
        },
        CONSTANTS,
    )
