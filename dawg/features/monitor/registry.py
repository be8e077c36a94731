"""
Bookkeeping for active filesystem watches.

The registry maps a normalized absolute path to the ``WatchEntry`` holding
its OS watch and subscribers. It performs no I/O and no locking; the owning
``Monitor`` serializes every mutation.
"""
from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ...utils import is_under_path

WatchCallback = Callable[[str, str], None]


@dataclass(eq=False)
class WatchEntry:
    """One OS-level watch plus the callbacks subscribed to it."""

    path: str
    is_directory: bool
    handle: Any
    callbacks: list[WatchCallback] = field(default_factory=list)


class PathRegistry:
    """Map of watched path -> ``WatchEntry`` (at most one entry per path)."""

    def __init__(self) -> None:
        self._entries: dict[str, WatchEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[WatchEntry]:
        # Iterate over a copy so callers may add/pop while walking.
        return iter(list(self._entries.values()))

    def paths(self) -> list[str]:
        return list(self._entries.keys())

    def get(self, key: str) -> WatchEntry | None:
        return self._entries.get(key)

    def add(self, entry: WatchEntry) -> None:
        if entry.path in self._entries:
            raise ValueError(f"Path already registered: {entry.path}")
        self._entries[entry.path] = entry

    def pop(self, key: str) -> WatchEntry | None:
        return self._entries.pop(key, None)

    def nearest_ancestor(self, key: str) -> WatchEntry | None:
        """Closest directory entry strictly above ``key``, if any."""
        current = key
        while True:
            parent = os.path.dirname(current)
            if not parent or parent == current:
                return None
            entry = self._entries.get(parent)
            if entry is not None and entry.is_directory:
                return entry
            current = parent

    def descendants(self, key: str) -> list[WatchEntry]:
        """Entries strictly beneath ``key``, in registration order."""
        return [
            entry
            for path, entry in self._entries.items()
            if path != key and is_under_path(path, key)
        ]
