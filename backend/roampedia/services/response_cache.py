"""Response cache — in-memory TTL cache for upstream API lookups."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class ResponseCache:
    """Key → value map with per-entry timestamps and lazy expiry.

    Entries are only evicted when read after their TTL; there is no background
    sweep and no size bound. All access happens on one event loop, so no lock
    is taken. Concurrent misses on the same key both fetch and the last write
    wins.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
