"""
Per-Worker Local Cache

Bounded, TTL-aware in-memory cache that fronts the remote store for one
worker. It is never shared across workers, so it carries no lock.

Eviction:
- Capacity: least-recently-used entry is dropped when full
- Age: entries older than ttl_seconds are dropped lazily on read

Only values the remote store actually returned are cached. A miss is never
stored as a negative entry, so every miss goes back to the remote store.
"""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fieldcache.core.config.constants import (
    LOCAL_CACHE_DEFAULT_MAX_ENTRIES,
    LOCAL_CACHE_DEFAULT_TTL_SECONDS,
)


@dataclass
class LocalCacheEntry:
    key: str
    value: Any
    inserted_at: float


class LocalCache:
    """
    In-memory LRU cache with lazy per-entry expiry.

    Implementation Details:
    - Uses OrderedDict for O(1) access and LRU ordering
    - Expiry is checked on read; there is no background sweep
    - ttl_seconds == 0 or max_entries == 0 disables the cache entirely
    """

    def __init__(
        self,
        max_entries: int = LOCAL_CACHE_DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = LOCAL_CACHE_DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: Maximum number of entries to hold
            ttl_seconds: Entry lifetime in seconds
            clock: Monotonic time source (injectable for tests)
        """
        if max_entries < 0:
            raise ValueError("max_entries cannot be negative")
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds cannot be negative")

        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, LocalCacheEntry] = OrderedDict()

        self._hits = 0
        self._misses = 0
        self._expirations = 0
        self._evictions = 0

    @property
    def enabled(self) -> bool:
        return self._ttl_seconds > 0 and self._max_entries > 0

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> Any | None:
        """
        Return the cached value, or None if absent or expired.

        A hit moves the entry to the most-recently-used position.
        """
        if not self.enabled:
            return None

        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._clock() - entry.inserted_at >= self._ttl_seconds:
            del self._entries[key]
            self._expirations += 1
            self._misses += 1
            return None

        self._entries.move_to_end(key)
        self._hits += 1
        return entry.value

    def put(self, key: str, value: Any) -> None:
        """Insert or overwrite, evicting least-recently-used entries beyond capacity."""
        if not self.enabled:
            return

        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = LocalCacheEntry(key=key, value=value, inserted_at=self._clock())

        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
            self._evictions += 1

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        """Keys in LRU order (oldest first, newest last)."""
        return list(self._entries.keys())

    def stats(self) -> dict[str, Any]:
        total = self._hits + self._misses
        return {
            "enabled": self.enabled,
            "size": self.size,
            "max_entries": self._max_entries,
            "ttl_seconds": self._ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "expirations": self._expirations,
            "evictions": self._evictions,
            "hit_rate": round(self._hits / total, 3) if total > 0 else 0.0,
        }
