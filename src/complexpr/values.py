"""Runtime value model for the complexpr evaluator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import TYPE_CHECKING, Callable, ClassVar

if TYPE_CHECKING:
    from .ast import Node
    from .context import Context


INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


@dataclass(frozen=True, eq=False)
class Value:
    """Base of the closed value union.

    ``==`` is the language equality: numeric kinds compare across each other
    after promotion, every other kind boundary compares unequal.
    """

    type_name: ClassVar[str] = "void"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return values_equal(self, other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return not values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return to_string(self)


@dataclass(frozen=True, eq=False)
class Integer(Value):
    value: int
    type_name: ClassVar[str] = "int"


@dataclass(frozen=True, eq=False)
class Float(Value):
    value: float
    type_name: ClassVar[str] = "float"


@dataclass(frozen=True, eq=False)
class Complex(Value):
    value: complex
    type_name: ClassVar[str] = "complex"

    @classmethod
    def from_parts(cls, re: float, im: float) -> "Complex":
        return cls(complex(re, im))


@dataclass(frozen=True, eq=False)
class Ratio(Value):
    """Exact rational; ``Fraction`` keeps it reduced with a positive denominator."""

    value: Fraction
    type_name: ClassVar[str] = "ratio"

    @classmethod
    def from_parts(cls, numerator: int, denominator: int) -> "Ratio":
        return cls(Fraction(numerator, denominator))


@dataclass(frozen=True, eq=False)
class Bool(Value):
    value: bool
    type_name: ClassVar[str] = "bool"


@dataclass(frozen=True, eq=False)
class Str(Value):
    value: str
    type_name: ClassVar[str] = "str"


@dataclass(frozen=True, eq=False)
class List(Value):
    items: tuple[Value, ...] = ()
    type_name: ClassVar[str] = "list"

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True, eq=False)
class NativeFunction(Value):
    """Host callable taking the evaluated argument list."""

    name: str
    func: Callable[[list[Value]], Value]
    type_name: ClassVar[str] = "func"


@dataclass(frozen=True, eq=False)
class Lambda(Value):
    params: tuple[str, ...]
    body: "Node"
    ctx: "Context"
    type_name: ClassVar[str] = "func"


@dataclass(frozen=True, eq=False)
class Void(Value):
    type_name: ClassVar[str] = "void"


VOID = Void()
TRUE = Bool(True)
FALSE = Bool(False)

NUMERIC_TYPES = (Integer, Float, Complex, Ratio)
REAL_TYPES = (Integer, Float, Ratio)
CALLABLE_TYPES = (NativeFunction, Lambda, Bool)


def is_numeric(value: Value) -> bool:
    return isinstance(value, NUMERIC_TYPES)


def is_real(value: Value) -> bool:
    return isinstance(value, REAL_TYPES)


def is_callable_value(value: Value) -> bool:
    return isinstance(value, CALLABLE_TYPES)


def is_nan(value: Value) -> bool:
    if isinstance(value, Float):
        return math.isnan(value.value)
    if isinstance(value, Complex):
        return math.isnan(value.value.real) or math.isnan(value.value.imag)
    return False


def is_infinite(value: Value) -> bool:
    if isinstance(value, Float):
        return math.isinf(value.value)
    if isinstance(value, Complex):
        return math.isinf(value.value.real) or math.isinf(value.value.imag)
    return False


def type_name(value: Value) -> str:
    return value.type_name


def from_python(value: object) -> Value:
    """Wrap a plain Python scalar or sequence as a ``Value``."""
    if isinstance(value, Value):
        return value
    if value is None:
        return VOID
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, int):
        return Integer(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, complex):
        return Complex(value)
    if isinstance(value, Fraction):
        return Ratio(value)
    if isinstance(value, str):
        return Str(value)
    if isinstance(value, (list, tuple)):
        return List(tuple(from_python(item) for item in value))
    raise TypeError(f"Cannot convert {type(value).__name__} to a complexpr value")


def promote_numbers(a: Value, b: Value) -> tuple[object, object]:
    """Bring two numeric values to a common Python number type.

    Integer pairs stay ``int``, any ``Complex`` makes both ``complex``,
    any ``Float`` makes both ``float``, and ``Integer``/``Ratio`` mixes
    become ``Fraction``.
    """
    x = a.value
    y = b.value
    if isinstance(a, Complex) or isinstance(b, Complex):
        return complex(x), complex(y)
    if isinstance(a, Float) or isinstance(b, Float):
        return float(x), float(y)
    if isinstance(a, Ratio) or isinstance(b, Ratio):
        return Fraction(x), Fraction(y)
    return x, y


def values_equal(a: Value, b: Value) -> bool:
    if is_numeric(a) and is_numeric(b):
        x, y = promote_numbers(a, b)
        return x == y
    if isinstance(a, Bool) and isinstance(b, Bool):
        return a.value == b.value
    if isinstance(a, Str) and isinstance(b, Str):
        return a.value == b.value
    if isinstance(a, List) and isinstance(b, List):
        return len(a.items) == len(b.items) and all(
            values_equal(x, y) for x, y in zip(a.items, b.items)
        )
    if isinstance(a, Void) and isinstance(b, Void):
        return True
    return False


def compare(a: Value, b: Value) -> int | None:
    """Three-way ordering, or ``None`` when the pair is unordered."""
    if is_real(a) and is_real(b):
        x, y = promote_numbers(a, b)
        if isinstance(x, float) and (math.isnan(x) or math.isnan(y)):
            return None
    elif isinstance(a, Bool) and isinstance(b, Bool):
        x, y = a.value, b.value
    elif isinstance(a, Str) and isinstance(b, Str):
        x, y = a.value, b.value
    else:
        return None
    if x < y:
        return -1
    if x > y:
        return 1
    return 0


def format_float(x: float) -> str:
    """Positional decimal rendering that tokenizes back to the same float."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = repr(x)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
        if "." not in text:
            text += ".0"
    return text


def _escape(text: str) -> str:
    out = []
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\x1b":
            out.append("\\e")
        elif ch == "\0":
            out.append("\\0")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def to_string(value: Value) -> str:
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Float):
        return format_float(value.value)
    if isinstance(value, Complex):
        re = format_float(value.value.real)
        im = value.value.imag
        if im < 0 or (im == 0 and math.copysign(1.0, im) < 0):
            return f"{re}-{format_float(-im)}i"
        return f"{re}+{format_float(im)}i"
    if isinstance(value, Ratio):
        return f"{value.value.numerator}//{value.value.denominator}"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Str):
        return value.value
    if isinstance(value, List):
        return "(" + ", ".join(repr_text(item) for item in value.items) + ")"
    if isinstance(value, NativeFunction):
        return f"<function {value.name}>"
    if isinstance(value, Lambda):
        return f"<function of {len(value.params)} args>"
    return "<void>"


def repr_text(value: Value) -> str:
    """Like ``to_string`` but strings are quoted and escaped."""
    if isinstance(value, Str):
        return _escape(value.value)
    return to_string(value)
