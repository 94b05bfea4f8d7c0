"""Mutable identifier-to-value environment."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Callable, Iterable, Iterator

from .values import NativeFunction, Value


def _validate(key: object, value: object) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Context keys must be str, got {type(key).__name__}")
    if not isinstance(value, Value):
        raise TypeError(f"ctx[{key!r}] must be a complexpr Value, got {type(value).__name__}")


class Context(MutableMapping[str, Value]):
    """String-keyed map of bindings an expression is evaluated against."""

    def __init__(self, data: Iterable[tuple[str, Value]] | MutableMapping[str, Value] | None = None) -> None:
        self._data: dict[str, Value] = {}
        if data is not None:
            items = data.items() if isinstance(data, MutableMapping) else data
            for key, value in items:
                self[key] = value

    def __getitem__(self, key: str) -> Value:
        return self._data[key]

    def __setitem__(self, key: str, value: Value) -> None:
        _validate(key, value)
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"Context({sorted(self._data)!r})"

    def copy(self) -> "Context":
        # Values are immutable, so a shallow copy is an independent snapshot.
        clone = Context()
        clone._data = dict(self._data)
        return clone

    def insert_function(self, name: str, func: Callable[[list[Value]], Value]) -> None:
        self[name] = NativeFunction(name, func)

    def update_from(self, other: "Context") -> None:
        self._data.update(other._data)
