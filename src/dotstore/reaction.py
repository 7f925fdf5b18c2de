"""Reactions — run a side effect when one path's snapshot actually changes.

A store notifies subscribers conservatively: writing "user.age" also pings
subscribers of "user" and of anything indexed beneath the written path.
A Reaction turns those pings into "call effect_fn(value) only if the value
at my path differs from last time", the building block for UI bindings.

Snapshots are deep-copied before being remembered, so an in-place write to
a nested field is detected even though the parent object is the same.

Usage:
    store = Store({"user": {"name": "Ada", "age": 36}})
    seen = []
    r = reaction(store, "user", lambda user: seen.append(user["age"]))

    store.set("user.age", 37)    # seen == [37]
    store.set("user.age", 37)    # seen == [37]: notified, but unchanged
    r.dispose()
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from dotstore._subscribers import Callback, Unsubscribe

if TYPE_CHECKING:
    from dotstore.map_store import MapStore
    from dotstore.store import Store

T = TypeVar("T")


class Reaction:
    """Snapshot-diffing subscriber. Call dispose() to stop it."""

    __slots__ = ("_read", "_effect_fn", "_last_value", "_initialized", "_unsubscribe", "_disposed")

    def __init__(self, read: Callable[[], T], effect_fn: Callable[[T], None]) -> None:
        self._read = read
        self._effect_fn = effect_fn
        self._last_value: Any = None
        self._initialized = False
        self._unsubscribe: Unsubscribe | None = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def value(self) -> Any:
        """The last snapshot seen."""
        return self._last_value

    def _attach(self, subscribe: Callable[[Callback], Unsubscribe], fire_immediately: bool) -> None:
        self._unsubscribe = subscribe(self._run)
        if fire_immediately:
            self._run()
        else:
            # Record the starting snapshot but suppress the initial effect.
            self._last_value = copy.deepcopy(self._read())
            self._initialized = True

    def _run(self) -> None:
        if self._disposed:
            return
        new_value = self._read()
        if not self._initialized or new_value != self._last_value:
            self._last_value = copy.deepcopy(new_value)
            self._initialized = True
            self._effect_fn(new_value)

    def dispose(self) -> None:
        self._disposed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Reaction({self._last_value!r}, {state})"


def reaction(
    store: Store | MapStore,
    path: str,
    effect_fn: Callable[[Any], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Call effect_fn(value) whenever the value at path changes.

    Works on both store kinds; for a MapStore, path is "key" or "key.field".
    """
    r = Reaction(lambda: store.get(path), effect_fn)
    r._attach(lambda cb: store.subscribe(path, cb), fire_immediately)
    return r


def keys_reaction(
    store: MapStore,
    effect_fn: Callable[[tuple[str, ...]], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Call effect_fn(keys) whenever entries are added or removed."""
    r = Reaction(lambda: store.cached_keys, effect_fn)
    r._attach(store.subscribe_keys, fire_immediately)
    return r


def size_reaction(
    store: MapStore,
    effect_fn: Callable[[int], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Call effect_fn(size) whenever the number of entries changes."""
    r = Reaction(store.get_size, effect_fn)
    r._attach(store.subscribe_size, fire_immediately)
    return r
