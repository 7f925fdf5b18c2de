"""Scoped stores — a fresh store per provide() block, reachable via use().

    settings = create_scoped_store(initial_data={"theme": "dark"})

    with settings.provide():
        settings.use().set("theme", "light")
        render()                      # anything in here may call settings.use()

    settings.use()                    # StoreUsageError: not inside provide()

The current store lives in a ContextVar, so nested provide() blocks shadow
outer ones and each thread / asyncio task sees its own scope.
"""

from __future__ import annotations

import contextvars
import copy
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterator, TypeVar

from dotstore.errors import StoreUsageError
from dotstore.map_store import MapStore
from dotstore.store import Store

S = TypeVar("S")


class ScopedStore(Generic[S]):
    """Factory plus scope: provide() builds and installs, use() fetches."""

    __slots__ = ("_factory", "_name", "_current")

    def __init__(self, factory: Callable[[], S], name: str = "store") -> None:
        self._factory = factory
        self._name = name
        self._current: contextvars.ContextVar[S | None] = contextvars.ContextVar(
            f"dotstore_scope_{name}", default=None
        )

    @contextmanager
    def provide(self) -> Iterator[S]:
        """Mount a new store instance for the duration of the block."""
        store = self._factory()
        token = self._current.set(store)
        try:
            yield store
        finally:
            self._current.reset(token)

    def use(self) -> S:
        """The store of the innermost enclosing provide() block."""
        store = self._current.get()
        if store is None:
            raise StoreUsageError(f"{self._name}.use() must be called within {self._name}.provide()")
        return store

    @property
    def active(self) -> bool:
        return self._current.get() is not None

    def __repr__(self) -> str:
        state = "active" if self.active else "inactive"
        return f"ScopedStore({self._name!r}, {state})"


def create_scoped_store(
    initial_data: Mapping | None = None,
    fallback_data: Mapping | None = None,
    *,
    devtools: str | None = None,
    name: str = "store",
) -> ScopedStore[Store]:
    initial_data = copy.deepcopy(initial_data)
    fallback_data = copy.deepcopy(fallback_data)
    return ScopedStore(lambda: Store(initial_data, fallback_data, devtools=devtools), name)


def create_scoped_map_store(
    initial_data: Mapping[str, Any] | None = None,
    fallback_data: Mapping | None = None,
    *,
    devtools: str | None = None,
    name: str = "map_store",
) -> ScopedStore[MapStore]:
    initial_data = copy.deepcopy(initial_data)
    fallback_data = copy.deepcopy(fallback_data)
    return ScopedStore(lambda: MapStore(initial_data, fallback_data, devtools=devtools), name)
