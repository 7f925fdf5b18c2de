"""Store — a nested dict addressed by dot-paths, with path-scoped subscriptions.

    store = Store(
        initial_data={"user": {"name": "John", "age": 30}},
        fallback_data={"user": {"name": "Guest", "age": 0}},
    )
    store.get("user.name")                 # "John"
    store.update("user.age", lambda a: a + 1)
    store.remove("user.name")
    store.get("user.name")                 # "Guest" (fallback)
    store.reset()                          # back to the initial data

Reads of missing paths return None; writes create missing parents.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Callable

from dotstore._engine import BaseStore
from dotstore._locate import MISSING, Located, locate, materialize, read
from dotstore._paths import ParsedPath


class Store(BaseStore):
    """Single nested-object store."""

    def __init__(
        self,
        initial_data: Mapping | None = None,
        fallback_data: Mapping | None = None,
        *,
        devtools: str | None = None,
    ) -> None:
        super().__init__(fallback_data)
        self._state = copy.deepcopy(dict(initial_data)) if initial_data else {}
        self._initial = copy.deepcopy(self._state)
        self._setup_devtools(devtools)

    def _locate(self, parsed: ParsedPath) -> Located:
        return locate(parsed.parent_keys, self._state, self._fallback, self._initial)

    def get(self, path: str) -> Any:
        """Live value at path, else the fallback value, else None."""
        parsed = self._paths.resolve(path)
        located = self._locate(parsed)
        value = read(located.parent, parsed.current_key)
        if value is MISSING:
            value = read(located.fallback, parsed.current_key)
        return None if value is MISSING else value

    def get_initial(self, path: str) -> Any:
        """Value at path in the initial snapshot, or None."""
        parsed = self._paths.resolve(path)
        value = read(self._locate(parsed).initial, parsed.current_key)
        return None if value is MISSING else value

    def set(self, path: str, value: Any, notify: bool = True) -> None:
        """Write value at path, creating any missing parents."""
        parsed = self._paths.resolve(path)
        parent = self._locate(parsed).parent
        if parent is MISSING:
            parent = materialize(self._state, parsed.parent_keys)
        parent[parsed.current_key] = value

        self._send_devtools("SET", path, value)
        if notify:
            self._notify_path(path)

    def update(self, path: str, value: Any | Callable[[Any], Any], notify: bool = True) -> None:
        """Rewrite an existing slot. No-op when a parent of path is missing.

        If value is callable it receives the current value (None if unset)
        and its result is stored.
        """
        parsed = self._paths.resolve(path)
        parent = self._locate(parsed).parent
        if parent is MISSING:
            return
        if callable(value):
            value = value(parent.get(parsed.current_key))
        parent[parsed.current_key] = value

        self._send_devtools("UPDATE", path, value)
        if notify:
            self._notify_path(path)

    def remove(self, path: str, notify: bool = True) -> None:
        """Delete the key at path. No-op when a parent of path is missing."""
        parsed = self._paths.resolve(path)
        parent = self._locate(parsed).parent
        if parent is MISSING:
            return
        parent.pop(parsed.current_key, None)

        self._send_devtools("REMOVE", path)
        if notify:
            self._notify_path(path)

    def reset(self, notify: bool = True) -> None:
        """Restore the initial data and notify every subscribed path."""
        self._state = copy.deepcopy(self._initial)

        self._send_devtools("RESET")
        if notify:
            self._notify_all()

    def __repr__(self) -> str:
        return f"Store({self._state!r})"


def create_store(
    initial_data: Mapping | None = None,
    fallback_data: Mapping | None = None,
    *,
    devtools: str | None = None,
) -> Store:
    return Store(initial_data, fallback_data, devtools=devtools)
