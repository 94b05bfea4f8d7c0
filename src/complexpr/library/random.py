"""Pseudo-random values."""

from __future__ import annotations

import random as _random

from ..context import Context
from ..errors import bound_args, wrong_argument_type
from ..values import VOID, Float, Integer, List, Value
from .common import build_table, require_int

_rng = _random.Random()


def seed(value: int | None) -> None:
    """Reseed the generator shared by the random functions."""
    _rng.seed(value)


def random(args: list[Value]) -> Value:
    bound_args(len(args), 0)
    return Float(_rng.random())


def random_range(args: list[Value]) -> Value:
    """``random_range(max)`` or ``random_range(min, max)``; void for an empty range."""
    bound_args(len(args), 1, 2)
    if len(args) == 1:
        low, high = 0, require_int(args[0])
    else:
        low, high = require_int(args[0]), require_int(args[1])
    if low >= high:
        return VOID
    return Integer(_rng.randrange(low, high))


def random_choose(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    seq = args[0]
    if not isinstance(seq, List):
        raise wrong_argument_type(f"Argument '{seq}' is of the wrong type")
    if not seq.items:
        return VOID
    return _rng.choice(seq.items)


def shuffle(args: list[Value]) -> Value:
    bound_args(len(args), 1)
    seq = args[0]
    if not isinstance(seq, List):
        raise wrong_argument_type(f"Argument '{seq}' is of the wrong type")
    items = list(seq.items)
    _rng.shuffle(items)
    return List(tuple(items))


def table() -> Context:
    return build_table(
        {
            "random": random,
            "random_range": random_range,
            "random_choose": random_choose,
            "shuffle": shuffle,
        }
    )
