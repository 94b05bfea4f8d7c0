"""Evaluate complexpr expressions from the command line or standard input."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from . import config
from .context import Context
from .environments import CONTEXTS
from .errors import ComplexprError
from .evaluator import evaluate
from .values import Void, repr_text

logger = logging.getLogger("complexpr")


def _run(source: str, ctx: Context, simplify: bool, out: TextIO, err: TextIO) -> bool:
    try:
        result = evaluate(source, ctx, simplify=simplify)
    except ComplexprError as exc:
        err.write(f"Error: {exc}\n")
        return False
    if not isinstance(result, Void):
        out.write(repr_text(result) + "\n")
        ctx["_"] = result
    return True


def run_lines(lines, ctx: Context, simplify: bool, out: TextIO, err: TextIO) -> int:
    """Evaluate each non-blank line in one context; the last result is bound to ``_``."""
    failures = 0
    for line in lines:
        if not line.strip():
            continue
        if not _run(line, ctx, simplify, out, err):
            failures += 1
    return failures


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="complexpr", description=__doc__)
    parser.add_argument("files", nargs="*", help="script files to evaluate in order")
    parser.add_argument(
        "-e",
        "--expr",
        action="append",
        default=[],
        help="expression to evaluate (may be repeated)",
    )
    parser.add_argument(
        "--context",
        choices=sorted(CONTEXTS),
        default="full",
        help="initial environment",
    )
    parser.add_argument(
        "--simplify",
        action="store_true",
        default=config.SIMPLIFY_BY_DEFAULT,
        help="fold literal-only subexpressions before evaluation",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ctx = CONTEXTS[args.context]()
    out, err = sys.stdout, sys.stderr

    if not args.files and not args.expr:
        logger.debug("Reading expressions from stdin")
        run_lines(sys.stdin, ctx, args.simplify, out, err)
        return 0

    for path in args.files:
        try:
            source = Path(path).read_text(encoding=config.INCLUDE_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            err.write(f"Error: cannot read {path}: {exc}\n")
            return 1
        if not _run(source, ctx, args.simplify, out, err):
            return 1
    for source in args.expr:
        if not _run(source, ctx, args.simplify, out, err):
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
