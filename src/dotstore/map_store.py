"""MapStore — a keyed collection of nested entries sharing one fallback.

The first path segment selects the entry, the rest addresses into it:

    store = MapStore(fallback_data={"status": "idle"})
    store.key("job-1").set({"status": "running", "progress": {"pct": 0}})
    store.key("job-1").update("progress.pct", lambda p: p + 10)
    store.get("job-1.progress.pct")        # 10
    store.get("job-2.status")              # "idle" (fallback)
    store.get_keys()                       # ["job-1"]

Besides per-path subscriptions, the key list and the size are reactive
values of their own, broadcast whenever an entry is added or removed (but
not when a field inside an existing entry changes). Map keys must not
contain ".".
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Callable

from dotstore._engine import BaseStore
from dotstore._locate import MISSING, Located, locate, read
from dotstore._paths import ParsedPath
from dotstore._subscribers import Callback, Listeners, Unsubscribe


def _full_path(map_key: str, path: str | None = None) -> str:
    return f"{map_key}.{path}" if path else map_key


class KeyHandle:
    """Accessor bound to one entry of a MapStore."""

    __slots__ = ("_store", "_key")

    def __init__(self, store: MapStore, map_key: str) -> None:
        self._store = store
        self._key = map_key

    @property
    def key(self) -> str:
        return self._key

    def path(self, path: str | None = None) -> str:
        """Full store path for a path inside this entry."""
        return _full_path(self._key, path)

    def get(self, path: str | None = None) -> Any:
        """The whole entry, or the value at path inside it."""
        return self._store.get(_full_path(self._key, path))

    def set(self, value: Any, notify: bool = True) -> None:
        self._store.set(self._key, value, notify)

    def update(self, path: str | None, value: Any | Callable[[Any], Any], notify: bool = True) -> None:
        self._store.update(self._key, path, value, notify)

    def remove(self, notify: bool = True) -> None:
        self._store.remove(self._key, notify)

    def subscribe(self, callback: Callback, path: str | None = None) -> Unsubscribe:
        return self._store.subscribe(_full_path(self._key, path), callback)

    def __repr__(self) -> str:
        return f"KeyHandle({self._key!r})"


class MapStore(BaseStore):
    """Keyed-collection store: one independent sub-tree per string key."""

    _keyed = True

    def __init__(
        self,
        initial_data: Mapping[str, Any] | None = None,
        fallback_data: Mapping | None = None,
        *,
        devtools: str | None = None,
    ) -> None:
        super().__init__(fallback_data)
        self._state = copy.deepcopy(dict(initial_data)) if initial_data else {}
        self._initial = copy.deepcopy(self._state)
        self._keys_listeners = Listeners()
        self._size_listeners = Listeners()
        self._cached_keys: tuple[str, ...] = tuple(self._state)
        self._setup_devtools(devtools)

    # --- Key list / size ---

    def key(self, map_key: str) -> KeyHandle:
        return KeyHandle(self, map_key)

    def get_keys(self) -> list[str]:
        return list(self._state)

    def get_size(self) -> int:
        return len(self._state)

    @property
    def cached_keys(self) -> tuple[str, ...]:
        """Key tuple whose identity only changes when the key set does."""
        return self._cached_keys

    def subscribe_keys(self, callback: Callback) -> Unsubscribe:
        return self._keys_listeners.add(callback)

    def subscribe_size(self, callback: Callback) -> Unsubscribe:
        return self._size_listeners.add(callback)

    def _refresh_keys(self, notify: bool) -> None:
        self._cached_keys = tuple(self._state)
        if notify:
            self._keys_listeners.notify()
            self._size_listeners.notify()

    def __contains__(self, map_key: str) -> bool:
        return map_key in self._state

    def __len__(self) -> int:
        return len(self._state)

    # --- Reads ---

    def _locate(self, parsed: ParsedPath) -> Located:
        return locate(
            parsed.parent_keys,
            self._state.get(parsed.map_key, MISSING),
            self._fallback,
            self._initial.get(parsed.map_key, MISSING),
        )

    def get(self, path: str) -> Any:
        """Value at "key.field..." (live, then fallback), or the whole entry for "key"."""
        parsed = self._paths.resolve(path)
        if not parsed.current_key:
            entry = self._state.get(parsed.map_key, MISSING)
            return None if entry is MISSING else entry
        located = self._locate(parsed)
        value = read(located.parent, parsed.current_key)
        if value is MISSING:
            value = read(located.fallback, parsed.current_key)
        return None if value is MISSING else value

    def get_initial(self, path: str) -> Any:
        parsed = self._paths.resolve(path)
        if not parsed.current_key:
            entry = self._initial.get(parsed.map_key, MISSING)
            return None if entry is MISSING else entry
        value = read(self._locate(parsed).initial, parsed.current_key)
        return None if value is MISSING else value

    # --- Mutations ---

    def set(self, map_key: str, value: Any, notify: bool = True) -> None:
        """Store value as the whole entry for map_key."""
        is_new = map_key not in self._state
        self._paths.resolve(map_key)
        self._state[map_key] = value

        self._send_devtools("SET", map_key, value)
        if notify:
            self._notify_path(map_key)
        if is_new:
            # A new key always reaches key-list and size listeners.
            self._refresh_keys(True)

    def update(
        self,
        map_key: str,
        path: str | None,
        value: Any | Callable[[Any], Any],
        notify: bool = True,
    ) -> None:
        """Rewrite a slot inside an existing entry; the whole entry if path is empty.

        No-op if the entry or a parent of path is missing.
        """
        if map_key not in self._state:
            return
        full_path = _full_path(map_key, path)
        parsed = self._paths.resolve(full_path)

        if not parsed.current_key:
            if callable(value):
                value = value(self._state[map_key])
            self._state[map_key] = value
        else:
            parent = self._locate(parsed).parent
            if parent is MISSING:
                return
            if callable(value):
                value = value(parent.get(parsed.current_key))
            parent[parsed.current_key] = value

        self._send_devtools("UPDATE", full_path, value)
        if notify:
            self._notify_path(full_path)

    def remove(self, map_key: str, notify: bool = True) -> None:
        """Drop the entry for map_key. No-op if it is absent."""
        if map_key not in self._state:
            return
        del self._state[map_key]

        self._send_devtools("REMOVE", map_key)
        if notify:
            self._notify_path(map_key)
        self._refresh_keys(notify)

    def reset(self, notify: bool = True) -> None:
        """Restore the initial entries; broadcast to every subscriber."""
        self._state = copy.deepcopy(self._initial)

        self._send_devtools("RESET")
        if notify:
            self._notify_all()
        self._refresh_keys(notify)

    def clear(self, notify: bool = True) -> None:
        """Empty the collection in place; broadcast to every subscriber."""
        self._state.clear()

        self._send_devtools("CLEAR")
        if notify:
            self._notify_all()
        self._refresh_keys(notify)

    def _replace_state(self, state: dict) -> None:
        super()._replace_state(state)
        self._refresh_keys(True)

    def __repr__(self) -> str:
        return f"MapStore({self._state!r})"


def create_map_store(
    initial_data: Mapping[str, Any] | None = None,
    fallback_data: Mapping | None = None,
    *,
    devtools: str | None = None,
) -> MapStore:
    return MapStore(initial_data, fallback_data, devtools=devtools)
