"""
Worker Context

Explicit per-worker state handed to CacheOrchestrator.process(). Each worker
owns exactly one context; contexts are never shared, so nothing in here is
locked.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from fieldcache.infrastructure.cache.local_cache import LocalCache


@dataclass
class WorkerStats:
    records: int = 0
    matched: int = 0
    failures: int = 0
    local_hits: int = 0
    remote_hits: int = 0
    misses: int = 0
    keys_set: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "records": self.records,
            "matched": self.matched,
            "failures": self.failures,
            "local_hits": self.local_hits,
            "remote_hits": self.remote_hits,
            "misses": self.misses,
            "keys_set": self.keys_set,
        }


@dataclass
class WorkerContext:
    """
    State owned by one pipeline worker.

    The LocalCache is built on first access and lives as long as the context.
    """

    name: str
    local_cache_factory: Callable[[], LocalCache] = LocalCache
    stats: WorkerStats = field(default_factory=WorkerStats)
    _local_cache: LocalCache | None = field(default=None, init=False, repr=False)

    @property
    def local_cache(self) -> LocalCache:
        if self._local_cache is None:
            self._local_cache = self.local_cache_factory()
        return self._local_cache

    @property
    def has_local_cache(self) -> bool:
        return self._local_cache is not None

    def snapshot(self) -> dict[str, Any]:
        snapshot: dict[str, Any] = {"worker": self.name, **self.stats.to_dict()}
        if self._local_cache is not None:
            snapshot["local_cache"] = self._local_cache.stats()
        return snapshot
