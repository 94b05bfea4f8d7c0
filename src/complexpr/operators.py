"""Operator vocabulary and the arithmetic promotion lattice."""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Callable, Final

from .errors import ErrorKind, EvalError, invalid_argument_value, wrong_argument_type
from .values import (
    FALSE,
    INT_MAX,
    INT_MIN,
    TRUE,
    Bool,
    Complex,
    Float,
    Integer,
    Lambda,
    List,
    NativeFunction,
    Ratio,
    Str,
    Value,
    compare,
    is_numeric,
    promote_numbers,
    values_equal,
)

ARITHMETIC_OPS: Final[frozenset[str]] = frozenset({"+", "-", "*", "/", "%", "^", "//"})
COMPARISON_OPS: Final[frozenset[str]] = frozenset({"==", "!=", "<", ">", "<=", ">="})
BINARY_OPS: Final[frozenset[str]] = ARITHMETIC_OPS | COMPARISON_OPS
UNARY_OPS: Final[frozenset[str]] = frozenset({"-"})

# Canonical ordering used to put the cheaper operand first.
_TYPE_RANK: Final[dict[type, int]] = {
    Integer: 0,
    Float: 1,
    Complex: 2,
    Ratio: 3,
    Bool: 4,
    Str: 5,
    List: 6,
    NativeFunction: 7,
    Lambda: 8,
}


def type_rank(value: Value) -> int:
    return _TYPE_RANK.get(type(value), len(_TYPE_RANK))


def canonical_pair(a: Value, b: Value) -> tuple[Value, Value]:
    """Order a pair cheapest-first, for choosing the promotion."""
    if type_rank(b) < type_rank(a):
        return b, a
    return a, b


def checked_int(n: int) -> Integer:
    if n < INT_MIN or n > INT_MAX:
        raise invalid_argument_value(f"Integer result {n} is out of the 64-bit range")
    return Integer(n)


def checked_ratio(q: Fraction) -> Ratio:
    """Ratio whose numerator and denominator both fit in 64 bits."""
    if not INT_MIN <= q.numerator <= INT_MAX or q.denominator > INT_MAX:
        raise invalid_argument_value(f"Ratio result {q} is out of the 64-bit range")
    return Ratio(q)


def _ratio_pow(x: Fraction, n: int, a: Value) -> Ratio:
    if x == 0 and n < 0:
        raise _zero_divisor(a)
    # |x^n| has at least (bits - 1) * |n| bits in its larger part.
    bits = max(abs(x.numerator), x.denominator).bit_length()
    if (bits - 1) * abs(n) > 64:
        raise invalid_argument_value(f"Ratio result of {x}^{n} is out of the 64-bit range")
    return checked_ratio(x**n)


def _wrong_operands(op: str, a: Value, b: Value) -> EvalError:
    return EvalError(
        ErrorKind.WRONG_OPERAND_TYPES,
        f"Operator arguments '{a.type_name}' and '{b.type_name}' are of the wrong types for '{op}'",
    )


def _zero_divisor(a: Value) -> EvalError:
    return invalid_argument_value(f"Division of {a} by zero")


def truncated_rem(x, y):
    """Remainder with the sign of the dividend."""
    q = abs(x) // abs(y)
    r = abs(x) - q * abs(y)
    return -r if x < 0 else r


def float_div(x: float, y: float) -> float:
    if y == 0.0:
        if x == 0.0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def float_rem(x: float, y: float) -> float:
    if y == 0.0 or math.isinf(x) or math.isnan(x) or math.isnan(y):
        return math.nan
    return math.fmod(x, y)


def float_pow(x: float, y: float) -> float:
    odd_exponent = y.is_integer() and y % 2 == 1
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0 and odd_exponent:
            return -math.inf
        return math.inf
    except ValueError:
        if x == 0.0:
            return math.copysign(math.inf, x) if odd_exponent else math.inf
        return math.nan


def complex_div(x: complex, y: complex) -> complex:
    if y == 0:
        return complex(math.nan, math.nan)
    return x / y


def complex_pow(x: complex, y: complex) -> complex:
    try:
        return x**y
    except (ZeroDivisionError, OverflowError):
        return complex(math.nan, math.nan)


def _int_arith(op: str, x: int, y: int, a: Value) -> Value:
    if op == "+":
        return checked_int(x + y)
    if op == "-":
        return checked_int(x - y)
    if op == "*":
        return checked_int(x * y)
    if op == "/":
        if y == 0:
            raise _zero_divisor(a)
        return Float(x / y)
    if op == "//":
        if y == 0:
            raise _zero_divisor(a)
        return checked_ratio(Fraction(x, y))
    if op == "%":
        if y == 0:
            raise _zero_divisor(a)
        return checked_int(truncated_rem(x, y))
    if y < 0:
        return Float(float_pow(float(x), float(y)))
    if abs(x) > 1 and y > 64:
        raise invalid_argument_value(f"Integer result of {x}^{y} is out of the 64-bit range")
    return checked_int(x**y)


def _ratio_arith(op: str, x: Fraction, y: Fraction, a: Value) -> Value:
    if op == "+":
        return checked_ratio(x + y)
    if op == "-":
        return checked_ratio(x - y)
    if op == "*":
        return checked_ratio(x * y)
    if op in ("/", "//"):
        if y == 0:
            raise _zero_divisor(a)
        return checked_ratio(x / y)
    if op == "%":
        if y == 0:
            raise _zero_divisor(a)
        return checked_ratio(truncated_rem(x, y))
    if y.denominator == 1:
        return _ratio_pow(x, y.numerator, a)
    return Float(float_pow(float(x), float(y)))


def _float_arith(op: str, x: float, y: float) -> Value:
    if op == "+":
        return Float(x + y)
    if op == "-":
        return Float(x - y)
    if op == "*":
        return Float(x * y)
    if op == "/":
        return Float(float_div(x, y))
    if op == "%":
        return Float(float_rem(x, y))
    return Float(float_pow(x, y))


def _complex_arith(op: str, x: complex, y: complex) -> Value:
    if op == "+":
        return Complex(x + y)
    if op == "-":
        return Complex(x - y)
    if op == "*":
        return Complex(x * y)
    if op == "/":
        return Complex(complex_div(x, y))
    return Complex(complex_pow(x, y))


def _numeric_arith(op: str, a: Value, b: Value) -> Value:
    x, y = promote_numbers(a, b)
    if isinstance(x, complex):
        if op in ("%", "//"):
            raise _wrong_operands(op, a, b)
        return _complex_arith(op, x, y)
    if isinstance(x, float):
        if op == "//":
            raise _wrong_operands(op, a, b)
        return _float_arith(op, x, y)
    if isinstance(x, Fraction):
        return _ratio_arith(op, x, y, a)
    return _int_arith(op, x, y, a)


def _bool_arith(op: str, a: Bool, b: Bool) -> Value:
    if op == "+":
        return Bool(a.value or b.value)
    if op == "*":
        return Bool(a.value and b.value)
    if op == "^":
        return Bool(a.value != b.value)
    raise _wrong_operands(op, a, b)


def arithmetic(op: str, a: Value, b: Value) -> Value:
    """Apply an arithmetic operator to ``a op b``.

    The pair is canonicalized to pick the promotion; the operation itself
    always runs in source order.
    """
    low, high = canonical_pair(a, b)
    if is_numeric(low) and is_numeric(high):
        return _numeric_arith(op, a, b)
    if isinstance(low, Bool) and isinstance(high, Bool):
        return _bool_arith(op, a, b)
    if op == "+" and isinstance(low, Str) and isinstance(high, Str):
        return Str(a.value + b.value)
    if op == "+" and isinstance(low, List) and isinstance(high, List):
        return List(a.items + b.items)
    raise _wrong_operands(op, a, b)


def comparison(op: str, a: Value, b: Value) -> Bool:
    if op == "==":
        return TRUE if values_equal(a, b) else FALSE
    if op == "!=":
        return FALSE if values_equal(a, b) else TRUE
    order = compare(a, b)
    if order is None:
        return FALSE
    if op == "<":
        result = order < 0
    elif op == ">":
        result = order > 0
    elif op == "<=":
        result = order <= 0
    else:
        result = order >= 0
    return TRUE if result else FALSE


def binary_op(op: str, a: Value, b: Value) -> Value:
    if op in COMPARISON_OPS:
        return comparison(op, a, b)
    if op in ARITHMETIC_OPS:
        return arithmetic(op, a, b)
    raise EvalError(ErrorKind.OTHER, f"Unknown binary operator '{op}'")


def negate(a: Value) -> Value:
    if isinstance(a, Integer):
        return checked_int(-a.value)
    if isinstance(a, Float):
        return Float(-a.value)
    if isinstance(a, Ratio):
        return checked_ratio(-a.value)
    if isinstance(a, Complex):
        return Complex(-a.value)
    raise wrong_argument_type(f"Argument '{a}' is of the wrong type for negation")


_UNARY_TABLE: Final[dict[str, Callable[[Value], Value]]] = {"-": negate}


def unary_op(op: str, a: Value) -> Value:
    try:
        fn = _UNARY_TABLE[op]
    except KeyError:
        raise EvalError(ErrorKind.OTHER, f"Unknown unary operator '{op}'") from None
    return fn(a)
