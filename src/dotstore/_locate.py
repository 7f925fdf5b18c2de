"""Property locator — walk parent keys through the live, fallback and initial trees.

The three walks are independent: a miss in the live tree does not stop the
fallback walk. A miss is reported as MISSING, which is distinct from a key
that is present and holds None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, NamedTuple


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class Located(NamedTuple):
    """Containers one level above the target key, or MISSING per tree."""

    parent: Any
    fallback: Any
    initial: Any


def read(container: Any, key: str) -> Any:
    """container[key], or MISSING if container is not a mapping or lacks key."""
    if isinstance(container, Mapping):
        return container.get(key, MISSING)
    return MISSING


def _walk(root: Any, keys: Iterable[str]) -> Any:
    node = root
    for key in keys:
        node = read(node, key)
        if node is MISSING:
            return MISSING
    return node if isinstance(node, Mapping) else MISSING


def locate(parent_keys: tuple[str, ...], state: Any, fallback: Any, initial: Any) -> Located:
    """Find the parent container of a path in each tree.

    Live-tree containers are returned by reference so callers can write
    through them.
    """
    return Located(
        parent=_walk(state, parent_keys),
        fallback=_walk(fallback, parent_keys),
        initial=_walk(initial, parent_keys),
    )


def materialize(root: MutableMapping, parent_keys: Iterable[str]) -> MutableMapping:
    """Walk parent_keys from root, creating empty dicts where the walk breaks."""
    container = root
    for key in parent_keys:
        child = container.get(key)
        if not isinstance(child, MutableMapping):
            child = container[key] = {}
        container = child
    return container
