"""complexpr public API."""

from .ast import Node
from .context import Context
from .errors import (
    ComplexprError,
    ErrorKind,
    EvalError,
    TokenizeError,
    Trace,
    TraceKind,
    TreeError,
    bound_args,
    max_args,
    min_args,
)
from .evaluator import call_value, compile_cache_stats, compile_expression, eval_node, evaluate
from .lexer import Token, tokenize
from .parser import gen_tree, parse
from .simplify import simplify
from .values import (
    VOID,
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
    Void,
    from_python,
)

try:
    from .environments import ctx_default, ctx_empty, ctx_full, eval_default
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def ctx_empty():
            return Context()

        def ctx_default(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for ctx_default(). Install runtime deps first."
            ) from _jax_import_error

        def ctx_full(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for ctx_full(). Install runtime deps first."
            ) from _jax_import_error

        def eval_default(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for eval_default(). Install runtime deps first."
            ) from _jax_import_error

    else:
        raise

__all__ = [
    "tokenize",
    "Token",
    "parse",
    "gen_tree",
    "Node",
    "simplify",
    "compile_expression",
    "compile_cache_stats",
    "eval_node",
    "evaluate",
    "eval_default",
    "call_value",
    "Context",
    "ctx_empty",
    "ctx_default",
    "ctx_full",
    "Value",
    "Integer",
    "Float",
    "Complex",
    "Ratio",
    "Bool",
    "Str",
    "List",
    "NativeFunction",
    "Lambda",
    "Void",
    "VOID",
    "from_python",
    "ComplexprError",
    "TokenizeError",
    "TreeError",
    "EvalError",
    "ErrorKind",
    "Trace",
    "TraceKind",
    "bound_args",
    "min_args",
    "max_args",
]
