"""Subscriber registries — per-path callback sets and plain listener sets."""

from __future__ import annotations

from typing import Callable

Callback = Callable[[], None]
Unsubscribe = Callable[[], None]


class SubscriberRegistry:
    """path -> set of callbacks. Empty sets are dropped, never kept around."""

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: dict[str, set[Callback]] = {}

    def add(self, path: str, callback: Callback) -> None:
        self._subscribers.setdefault(path, set()).add(callback)

    def remove(self, path: str, callback: Callback) -> None:
        callbacks = self._subscribers.get(path)
        if callbacks is None:
            return
        callbacks.discard(callback)
        if not callbacks:
            del self._subscribers[path]

    def notify(self, path: str) -> None:
        """Call every subscriber of path exactly once."""
        callbacks = self._subscribers.get(path)
        if callbacks:
            for callback in list(callbacks):
                callback()

    def notify_all(self) -> None:
        """Broadcast to every currently-subscribed path."""
        for path in list(self._subscribers):
            self.notify(path)

    def __contains__(self, path: str) -> bool:
        return path in self._subscribers

    def __len__(self) -> int:
        return len(self._subscribers)


class Listeners:
    """A flat callback set for store-wide values (key list, size)."""

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        self._callbacks: set[Callback] = set()

    def add(self, callback: Callback) -> Unsubscribe:
        self._callbacks.add(callback)

        def _unsubscribe() -> None:
            self._callbacks.discard(callback)

        return _unsubscribe

    def notify(self) -> None:
        for callback in list(self._callbacks):
            callback()
