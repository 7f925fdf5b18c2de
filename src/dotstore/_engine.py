"""Mutation engine core — shared by Store and MapStore.

Owns the per-instance caches and subscriber registry, and implements the
notification algorithm. When path P changes, two fan-outs run:

1. Bubble-up: subscribers of P, then of every strict prefix of P. A reader
   of "user" is stale once "user.age" changes.
2. Fan-out: subscribers of every path ever resolved beneath P, looked up in
   the dependency index. A reader of "user.age" is stale once "user" is
   replaced wholesale.

Callbacks run synchronously. A callback may subscribe, unsubscribe or mutate
the store; there is no reentrancy guard.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from dotstore import devtools as _devtools
from dotstore._locate import MISSING
from dotstore._paths import PathResolver
from dotstore._subscribers import Callback, SubscriberRegistry, Unsubscribe


class BaseStore:
    """State, caches and subscribers for one store instance."""

    _keyed = False

    def __init__(self, fallback_data: Mapping | None = None) -> None:
        self._paths = PathResolver(keyed=self._keyed)
        self._subscribers = SubscriberRegistry()
        self._fallback: dict = copy.deepcopy(dict(fallback_data)) if fallback_data else {}
        self._state: dict = {}
        self._initial: dict = {}
        self._devtools: _devtools.DevToolsBridge | None = None

    def _setup_devtools(self, name: str | None) -> None:
        """Call once the live state exists."""
        if not name:
            return
        connection = _devtools.connect(name)
        if connection is not None:
            self._devtools = _devtools.DevToolsBridge(
                connection,
                self._state,
                on_replace=self._replace_state,
                on_reset=lambda: self.reset(True),
            )

    def _send_devtools(self, action: str, path: str = "", value: Any = MISSING) -> None:
        if self._devtools is not None:
            self._devtools.send(action, self._state, path, value)

    # --- Subscriptions ---

    def subscribe(self, path: str, callback: Callback) -> Unsubscribe:
        """Call callback whenever path, an ancestor or a descendant of it changes.

        Returns a function that removes the subscription.
        """
        self._paths.resolve(path)
        self._subscribers.add(path, callback)

        def _unsubscribe() -> None:
            self._subscribers.remove(path, callback)

        return _unsubscribe

    def unsubscribe(self, path: str, callback: Callback) -> None:
        self._subscribers.remove(path, callback)

    # --- Notification ---

    def _notify_path(self, path: str) -> None:
        parsed = self._paths.resolve(path)
        self._subscribers.notify(path)
        for parent_path in reversed(parsed.parent_paths):
            self._subscribers.notify(parent_path)
        for dependent in self._paths.dependents(path):
            self._subscribers.notify(dependent)

    def _notify_all(self) -> None:
        self._subscribers.notify_all()

    # --- Whole-state operations ---

    def _replace_state(self, state: dict) -> None:
        """Swap in an externally supplied state and broadcast."""
        self._state = copy.deepcopy(state)
        self._notify_all()

    def snapshot(self) -> dict:
        """Deep copy of the whole live state."""
        return copy.deepcopy(self._state)
