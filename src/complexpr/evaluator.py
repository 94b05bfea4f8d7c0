"""Tree-walking evaluator for complexpr expressions."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Callable

from . import config
from .ast import (
    Assign,
    AssignOp,
    BinaryOp,
    Block,
    FunctionCall,
    FunctionCreate,
    Identifier,
    ListExpr,
    Literal,
    Node,
    UnaryOp,
)
from .context import Context
from .errors import (
    ComplexprError,
    ErrorKind,
    EvalError,
    Trace,
    TraceKind,
    bound_args,
    wrong_argument_type,
)
from .operators import binary_op, unary_op
from .parser import parse
from .simplify import simplify as simplify_tree
from .values import FALSE, TRUE, VOID, Bool, Lambda, List, NativeFunction, Str, Value

logger = logging.getLogger(__name__)

RESERVED_NAMES = frozenset({"true", "false"})


@lru_cache(maxsize=config.COMPILE_CACHE_MAX)
def _compile_cached(source: str, simplify: bool) -> Node:
    node = parse(source)
    if simplify:
        node = simplify_tree(node)
    return node


def compile_expression(source: str, *, simplify: bool = False) -> Node:
    """Compile source to a tree that can be evaluated repeatedly."""
    return _compile_cached(source, simplify)


def compile_cache_stats() -> dict[str, int]:
    info = _compile_cached.cache_info()
    return {"hits": info.hits, "misses": info.misses, "size": info.currsize, "max_size": info.maxsize or 0}


def check_assignable(name: str) -> None:
    if name.startswith("$") or name in RESERVED_NAMES:
        raise EvalError(ErrorKind.RESERVED_IDENTIFIER, f"Identifier '{name}' is reserved")


def _unbound(name: str) -> EvalError:
    return EvalError(ErrorKind.UNBOUND_VARIABLE, f"Variable '{name}' has not been initialized")


def context_as_list(ctx: Context) -> List:
    return List(tuple(List((Str(key), ctx[key])) for key in sorted(ctx)))


def call_value(func: Value, args: list[Value], name: str | None = None) -> Value:
    """Call a function value with already-evaluated arguments.

    Booleans are callable as two-way selectors: ``true`` picks the first
    argument, ``false`` the second.
    """
    if isinstance(func, NativeFunction):
        try:
            return func.func(args)
        except EvalError as err:
            err.with_trace(Trace(TraceKind.FUNCTION, func.name))
            raise
    if isinstance(func, Lambda):
        try:
            bound_args(len(args), len(func.params))
            local = func.ctx.copy()
            for param, arg in zip(func.params, args):
                local[param] = arg
            return eval_node(func.body, local)
        except EvalError as err:
            err.with_trace(Trace(TraceKind.FUNCTION, name or "<lambda>"))
            raise
    if isinstance(func, Bool):
        bound_args(len(args), 2)
        return args[0] if func.value else args[1]
    raise EvalError(ErrorKind.NOT_A_FUNCTION, f"'{func}' is not a function")


def _string_arg(value: Value, form: str) -> str:
    if not isinstance(value, Str):
        raise wrong_argument_type(f"{form} expects a string name, got '{value.type_name}'")
    return value.value


def _special_include(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 1)
    path = _string_arg(eval_node(args[0], ctx), "$include")
    logger.debug("Including %s", path)
    try:
        source = Path(path).read_text(encoding=config.INCLUDE_ENCODING)
    except (OSError, UnicodeDecodeError) as err:
        raise EvalError(ErrorKind.IO_FAILURE, f"IO Error: {err}") from err
    try:
        tree = compile_expression(source)
    except ComplexprError as err:
        raise EvalError(ErrorKind.OTHER, f"In included file '{path}': {err}") from err
    return eval_node(tree, ctx)


def _special_catch(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 1, 2)
    try:
        return eval_node(args[0], ctx)
    except EvalError as err:
        logger.debug("$catch recovered from: %s", err)
        if len(args) == 2:
            return eval_node(args[1], ctx)
        return VOID


def _special_set(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 2)
    name = _string_arg(eval_node(args[0], ctx), "$set")
    check_assignable(name)
    ctx[name] = eval_node(args[1], ctx)
    return VOID


def _special_unset(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 1)
    name = _string_arg(eval_node(args[0], ctx), "$unset")
    ctx.pop(name, None)
    return VOID


def _special_is_set(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 1)
    name = _string_arg(eval_node(args[0], ctx), "$is_set")
    return TRUE if name in ctx else FALSE


def _special_get(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 1)
    name = _string_arg(eval_node(args[0], ctx), "$get")
    try:
        return ctx[name]
    except KeyError:
        raise _unbound(name) from None


def _special_ctx(args: tuple[Node, ...], ctx: Context) -> Value:
    bound_args(len(args), 0)
    return context_as_list(ctx)


_SPECIAL_FORMS: dict[str, Callable[[tuple[Node, ...], Context], Value]] = {
    "$include": _special_include,
    "$catch": _special_catch,
    "$set": _special_set,
    "$unset": _special_unset,
    "$is_set": _special_is_set,
    "$get": _special_get,
    "$ctx": _special_ctx,
}


def _eval_special(name: str, args: tuple[Node, ...], ctx: Context) -> Value:
    try:
        form = _SPECIAL_FORMS[name]
    except KeyError:
        raise EvalError(ErrorKind.UNKNOWN_SPECIAL_FORM, f"Special identifier '{name}' does not exist") from None
    return form(args, ctx)


def eval_node(node: Node, ctx: Context) -> Value:
    if isinstance(node, Literal):
        return node.value

    if isinstance(node, Identifier):
        name = node.name
        if name.startswith("$"):
            if name == "$ctx":
                return context_as_list(ctx)
            raise EvalError(ErrorKind.UNKNOWN_SPECIAL_FORM, f"Special identifier '{name}' does not exist")
        try:
            return ctx[name]
        except KeyError:
            raise _unbound(name) from None

    if isinstance(node, BinaryOp):
        left = eval_node(node.left, ctx)
        right = eval_node(node.right, ctx)
        try:
            return binary_op(node.op, left, right)
        except EvalError as err:
            err.with_trace(Trace(TraceKind.OPERATOR, node.op))
            raise

    if isinstance(node, UnaryOp):
        operand = eval_node(node.operand, ctx)
        try:
            return unary_op(node.op, operand)
        except EvalError as err:
            err.with_trace(Trace(TraceKind.OPERATOR, node.op))
            raise

    if isinstance(node, Assign):
        check_assignable(node.name)
        ctx[node.name] = eval_node(node.value, ctx)
        return VOID

    if isinstance(node, AssignOp):
        check_assignable(node.name)
        if node.name not in ctx:
            raise _unbound(node.name)
        value = eval_node(node.value, ctx)
        try:
            ctx[node.name] = binary_op(node.op, ctx[node.name], value)
        except EvalError as err:
            err.with_trace(Trace(TraceKind.OPERATOR, node.op + "="))
            raise
        return VOID

    if isinstance(node, FunctionCall):
        callee = node.callee
        if isinstance(callee, Identifier) and callee.name.startswith("$"):
            return _eval_special(callee.name, node.args, ctx)
        func = eval_node(callee, ctx)
        args = [eval_node(arg, ctx) for arg in node.args]
        name = callee.name if isinstance(callee, Identifier) else None
        return call_value(func, args, name)

    if isinstance(node, FunctionCreate):
        return Lambda(node.params, node.body, ctx.copy())

    if isinstance(node, ListExpr):
        return List(tuple(eval_node(item, ctx) for item in node.items))

    if isinstance(node, Block):
        result: Value = VOID
        for stmt in node.statements:
            result = eval_node(stmt, ctx)
        return result

    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def evaluate(source: str, ctx: Context, *, simplify: bool | None = None) -> Value:
    """Compile and evaluate ``source`` against ``ctx``, mutating it."""
    if simplify is None:
        simplify = config.SIMPLIFY_BY_DEFAULT
    return eval_node(compile_expression(source, simplify=simplify), ctx)
