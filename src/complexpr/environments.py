"""Preconfigured contexts assembled from the library tables.

The tables are built once per process and every accessor hands out a copy,
so callers can mutate their context freely.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .context import Context
from .evaluator import evaluate
from .values import Value
from .library import complex as complex_lib
from .library import io as io_lib
from .library import num as num_lib
from .library import ops as ops_lib
from .library import random as random_lib
from .library import trig as trig_lib
from .library import types as types_lib
from .library import util as util_lib

logger = logging.getLogger(__name__)

_DEFAULT_MODULES = (ops_lib, trig_lib, num_lib, types_lib, util_lib, complex_lib, random_lib)
_FULL_ONLY_MODULES = (io_lib,)


@lru_cache(maxsize=None)
def _default_table() -> Context:
    ctx = Context()
    for module in _DEFAULT_MODULES:
        ctx.update_from(module.table())
    logger.debug("Built default context with %d bindings", len(ctx))
    return ctx


@lru_cache(maxsize=None)
def _full_table() -> Context:
    ctx = _default_table().copy()
    for module in _FULL_ONLY_MODULES:
        ctx.update_from(module.table())
    logger.debug("Built full context with %d bindings", len(ctx))
    return ctx


def ctx_empty() -> Context:
    return Context()


def ctx_default() -> Context:
    """Arithmetic, trig, numeric, type, utility, complex and random functions."""
    return _default_table().copy()


def ctx_full() -> Context:
    """The default context plus console and file I/O."""
    return _full_table().copy()


def eval_default(source: str) -> Value:
    """One-shot evaluation against a fresh copy of the default context."""
    return evaluate(source, ctx_default())


CONTEXTS = {
    "empty": ctx_empty,
    "default": ctx_default,
    "full": ctx_full,
}
