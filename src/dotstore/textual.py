"""Textual integration for dotstore. Opt-in — requires textual.

Binds store paths to widgets: the effect re-renders when the path's value
changes. Guards, NoMatches handling and thread marshalling live here so
widget code can stay a plain effect function.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from dotstore.reaction import (
    keys_reaction as _keys_reaction,
    reaction as _reaction,
    size_reaction as _size_reaction,
)

# Apps currently inside pause(), keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend bound effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def _guard(app, effect_fn):
    _main = threading.get_ident()

    def _safe(value):
        try:
            effect_fn(value)
        except NoMatches:
            pass

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    return _guarded


def reaction(app, store, path, effect_fn, *, fire_immediately=False):
    """reaction() on a store path that safely drives Textual widgets.

    Skips while the app is paused or not running, swallows NoMatches from
    widget queries, and marshals background-thread writes via call_from_thread.
    """
    return _reaction(store, path, _guard(app, effect_fn), fire_immediately=fire_immediately)


def keys_reaction(app, store, effect_fn, *, fire_immediately=False):
    """keys_reaction() with the same guards, for list-style widgets."""
    return _keys_reaction(store, _guard(app, effect_fn), fire_immediately=fire_immediately)


def size_reaction(app, store, effect_fn, *, fire_immediately=False):
    """size_reaction() with the same guards, for counters and badges."""
    return _size_reaction(store, _guard(app, effect_fn), fire_immediately=fire_immediately)
