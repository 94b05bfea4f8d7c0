"""Console and file I/O functions; only present in the full context."""

from __future__ import annotations

import sys
from pathlib import Path

from .. import config
from ..context import Context
from ..errors import ErrorKind, EvalError, bound_args, invalid_argument_value, wrong_argument_type
from ..values import VOID, Integer, Str, Value, to_string
from .common import build_table

_EXIT_MIN = -(2**31)
_EXIT_MAX = 2**31 - 1


def _io_error(err: OSError | UnicodeDecodeError) -> EvalError:
    return EvalError(ErrorKind.IO_FAILURE, f"IO Error: {err}")


def print_(args: list[Value]) -> Value:
    try:
        sys.stdout.write("".join(to_string(arg) for arg in args))
        sys.stdout.flush()
    except OSError as err:
        raise _io_error(err) from err
    return VOID


def println(args: list[Value]) -> Value:
    try:
        sys.stdout.write("".join(to_string(arg) for arg in args) + "\n")
    except OSError as err:
        raise _io_error(err) from err
    return VOID


def readln(args: list[Value]) -> Value:
    """Next line of stdin including its newline; void at end of input."""
    bound_args(len(args), 0)
    try:
        line = sys.stdin.readline()
    except (OSError, UnicodeDecodeError) as err:
        raise _io_error(err) from err
    if not line:
        return VOID
    return Str(line)


def exit_(args: list[Value]) -> Value:
    bound_args(len(args), 0, 1)
    code = 0
    if args:
        if not isinstance(args[0], Integer):
            raise wrong_argument_type(f"Argument '{args[0]}' is of the wrong type")
        code = args[0].value
        if not _EXIT_MIN <= code <= _EXIT_MAX:
            raise invalid_argument_value(f"Argument '{code}' has an invalid value")
    raise SystemExit(code)


def read_file(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    path = args[0]
    if not isinstance(path, Str):
        raise wrong_argument_type(f"Argument '{path}' is of the wrong type")
    try:
        return Str(Path(path.value).read_text(encoding=config.INCLUDE_ENCODING))
    except (OSError, UnicodeDecodeError) as err:
        raise _io_error(err) from err


def table() -> Context:
    return build_table(
        {
            "print": print_,
            "println": println,
            "readln": readln,
            "exit": exit_,
            "read_file": read_file,
        }
    )
