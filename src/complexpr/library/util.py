"""List, string and control-flow helpers."""

from __future__ import annotations

from ..context import Context
from ..errors import (
    ComplexprError,
    ErrorKind,
    EvalError,
    Trace,
    TraceKind,
    bound_args,
    invalid_argument_value,
    min_args,
    other_error,
    wrong_argument_type,
)
from ..evaluator import call_value, evaluate
from ..values import TRUE, VOID, Integer, List, Str, Value, Void, to_string
from .common import build_table, require_int


def _wrong_type(value: Value) -> EvalError:
    return wrong_argument_type(f"Argument '{value}' is of the wrong type")


def value_to_context(value: Value) -> Context | None:
    """Build a context from a list of ``(name, value)`` pairs, or ``None`` if malformed."""
    if not isinstance(value, List):
        return None
    ctx = Context()
    for pair in value.items:
        if not isinstance(pair, List) or len(pair) != 2 or not isinstance(pair.items[0], Str):
            return None
        ctx[pair.items[0].value] = pair.items[1]
    return ctx


def eval_(args: list[Value]) -> Value:
    bound_args(len(args), 1, 2)
    src = args[0]
    if not isinstance(src, Str):
        raise _wrong_type(src)
    if len(args) == 2:
        ctx = value_to_context(args[1])
        if ctx is None:
            raise invalid_argument_value(f"Argument '{args[1]}' has an invalid value")
    else:
        ctx = Context()
    try:
        return evaluate(src.value, ctx)
    except ComplexprError as err:
        raise other_error(f"Inside eval: {err}") from err


def map_(args: list[Value]) -> Value:
    """``map(list, f, g, ...)`` applies each function in turn to every item."""
    min_args(len(args), 1)
    first = args[0]
    if not isinstance(first, List):
        raise _wrong_type(first)
    items = list(first.items)
    for func in args[1:]:
        items = [call_value(func, [item]) for item in items]
    return List(tuple(items))


def fold(args: list[Value]) -> Value:
    """``fold(init, list, f)`` or ``fold(list, f)`` seeded with the first item."""
    bound_args(len(args), 2, 3)
    if len(args) == 3:
        acc, seq, func = args
        if not isinstance(seq, List):
            raise _wrong_type(seq)
        items = seq.items
    else:
        seq, func = args
        if not isinstance(seq, List):
            raise _wrong_type(seq)
        if not seq.items:
            return VOID
        acc, items = seq.items[0], seq.items[1:]
    for item in items:
        acc = call_value(func, [acc, item])
    return acc


def rev(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, List):
        return List(tuple(reversed(x.items)))
    if isinstance(x, Str):
        return Str(x.value[::-1])
    raise _wrong_type(x)


def filter_(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    seq, func = args
    if isinstance(seq, List):
        return List(tuple(item for item in seq.items if call_value(func, [item]) == TRUE))
    if isinstance(seq, Str):
        return Str("".join(ch for ch in seq.value if call_value(func, [Str(ch)]) == TRUE))
    raise _wrong_type(seq)


def index(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    seq, idx = args
    if not isinstance(seq, (List, Str)):
        raise _wrong_type(seq)
    i = require_int(idx)
    length = len(seq.items) if isinstance(seq, List) else len(seq.value)
    if not 0 <= i < length:
        raise EvalError(ErrorKind.LIST_INDEX_OUT_OF_BOUNDS, f"List index {i} out of bounds")
    if isinstance(seq, List):
        return seq.items[i]
    return Str(seq.value[i])


def apply(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    func, seq = args
    if not isinstance(seq, List):
        raise _wrong_type(seq)
    return call_value(func, list(seq.items))


def len_(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if isinstance(x, List):
        return Integer(len(x.items))
    if isinstance(x, Str):
        return Integer(len(x.value))
    raise _wrong_type(x)


def chars(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    x = args[0]
    if not isinstance(x, Str):
        raise _wrong_type(x)
    return List(tuple(Str(ch) for ch in x.value))


def range_(args: list[Value]) -> Value:
    """``range(max)``, ``range(min, max)`` or ``range(min, max, step)`` with step > 0."""
    bound_args(len(args), 1, 3)
    bounds = [require_int(arg) for arg in args]
    if len(bounds) == 1:
        values = range(bounds[0])
    elif len(bounds) == 2:
        values = range(bounds[0], bounds[1])
    else:
        if bounds[2] <= 0:
            raise _wrong_type(args[2])
        values = range(bounds[0], bounds[1], bounds[2])
    return List(tuple(Integer(n) for n in values))


def first(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    seq, count = args
    if not isinstance(seq, (List, Str)):
        raise _wrong_type(seq)
    n = require_int(count)
    if n < 0:
        raise _wrong_type(count)
    if isinstance(seq, List):
        return List(seq.items[:n])
    return Str(seq.value[:n])


def repeat(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    seq, count = args
    if not isinstance(seq, (List, Str)):
        raise _wrong_type(seq)
    n = require_int(count)
    if n < 0:
        raise _wrong_type(count)
    if isinstance(seq, List):
        return List(seq.items * n)
    return Str(seq.value * n)


def enumerate_(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    seq = args[0]
    if not isinstance(seq, List):
        raise _wrong_type(seq)
    return List(tuple(List((Integer(i), item)) for i, item in enumerate(seq.items)))


def iter_(args: list[Value]) -> Value:
    """``iter(f, init, n)`` applies ``f`` to its own result ``n`` times."""
    bound_args(len(args), 3)
    func, value, count = args
    for _ in range(require_int(count)):
        value = call_value(func, [value])
    return value


def enumiter(args: list[Value]) -> Value:
    """Like ``iter`` but ``f`` also receives the iteration index first."""
    bound_args(len(args), 3)
    func, value, count = args
    for i in range(require_int(count)):
        value = call_value(func, [Integer(i), value])
    return value


def or_else(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    return args[1] if isinstance(args[0], Void) else args[0]


def and_then(args: list[Value]) -> Value:
    bound_args(len(args), 2)
    if isinstance(args[0], Void):
        return VOID
    return call_value(args[1], [args[0]])


def loop(args: list[Value]) -> Value:
    """Call a zero-argument function until it returns void; yields the last non-void result."""
    bound_args(len(args), 1)
    result: Value = VOID
    while True:
        value = call_value(args[0], [])
        if isinstance(value, Void):
            return result
        result = value


def error(args: list[Value]) -> Value:
    bound_args(len(args), 0, 1)
    message = to_string(args[0]) if args else "error"
    raise EvalError(ErrorKind.OTHER, message, Trace(TraceKind.MANUAL))


def table() -> Context:
    return build_table(
        {
            "eval": eval_,
            "map": map_,
            "fold": fold,
            "rev": rev,
            "filter": filter_,
            "index": index,
            "apply": apply,
            "len": len_,
            "chars": chars,
            "range": range_,
            "first": first,
            "repeat": repeat,
            "enumerate": enumerate_,
            "iter": iter_,
            "enumiter": enumiter,
            "or_else": or_else,
            "and_then": and_then,
            "loop": loop,
            "error": error,
        }
    )
