"""Path resolution — parse dot-paths once and index their ancestors.

A path like "user.profile.age" splits into parent keys ("user", "profile"),
strict prefixes ("user", "user.profile") and a final key ("age"). Parses are
cached per store; a path string always addresses the same shape, so the cache
never needs invalidation.

The first parse of a path also records it as a dependent of every prefix.
That reverse map is how a write to "user" reaches a subscriber of
"user.profile.age" without walking the tree. It only grows.
"""

from __future__ import annotations

from itertools import accumulate
from typing import NamedTuple


class ParsedPath(NamedTuple):
    parent_keys: tuple[str, ...]
    parent_paths: tuple[str, ...]
    current_key: str
    # Keyed stores only: first segment. current_key is "" when the path is the bare key.
    map_key: str | None = None


class PathResolver:
    """Parse cache plus the ancestor -> descendants dependency index."""

    __slots__ = ("_keyed", "_cache", "_dependents")

    def __init__(self, *, keyed: bool = False) -> None:
        self._keyed = keyed
        self._cache: dict[str, ParsedPath] = {}
        self._dependents: dict[str, set[str]] = {}

    def resolve(self, path: str, flush: bool = False) -> ParsedPath:
        """Return the cached parse of path, parsing and indexing it on first use."""
        parsed = self._cache.get(path)
        if parsed is None or flush:
            parsed = self._parse(path)
            self._cache[path] = parsed
            for parent_path in parsed.parent_paths:
                self._dependents.setdefault(parent_path, set()).add(path)
        return parsed

    def _parse(self, path: str) -> ParsedPath:
        keys = path.split(".")
        prefixes = list(accumulate(keys, lambda acc, key: f"{acc}.{key}"))
        parent_paths = tuple(prefixes[:-1])
        if self._keyed:
            return ParsedPath(
                parent_keys=tuple(keys[1:-1]),
                parent_paths=parent_paths,
                current_key=keys[-1] if len(keys) > 1 else "",
                map_key=keys[0],
            )
        return ParsedPath(
            parent_keys=tuple(keys[:-1]),
            parent_paths=parent_paths,
            current_key=keys[-1],
        )

    def dependents(self, path: str) -> tuple[str, ...]:
        """Every path resolved so far that lies strictly below path."""
        # Snapshot: callbacks may resolve new paths while we iterate.
        return tuple(self._dependents.get(path, ()))

    def __contains__(self, path: str) -> bool:
        return path in self._cache

    def __len__(self) -> int:
        return len(self._cache)
