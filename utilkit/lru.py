"""A least-recently-used cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Hashable

DEFAULT_CAPACITY = 10


class LruCache:
    """Fixed-capacity cache that evicts the least recently used entry."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()

    def put(self, key: Hashable, value: Any) -> None:
        """Insert or replace *key*, making it the most recently used.

        When the cache is full one entry, the least recently used, is dropped.
        """
        if key in self._entries:
            del self._entries[key]
        elif self._entries and len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[key] = value

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the value for *key* and mark it used, or *default*."""
        if key not in self._entries:
            return default
        self._entries.move_to_end(key)
        return self._entries[key]

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries