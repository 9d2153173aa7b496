"""
Remote Cache Protocol

This module defines the protocol for the distributed key-value store client
that the field cache adapter talks to, plus the immutable connection options
handed to it.

Architectural Decision: Protocol-based abstraction
- Enables multiple backend implementations (memcached, redis)
- Facilitates testing with in-memory fakes
- Follows dependency inversion principle
"""

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from fieldcache.core.config.constants import REMOTE_DEFAULT_TTL, CacheBackendType


@dataclass(frozen=True)
class ConnectionOptions:
    """
    Options applied to every remote cache connection.

    Attributes:
        ttl: Expiry in seconds for stored entries (0 = never expire)
        namespace: Optional prefix applied to every key as "<namespace>:<key>"
        backend: Which client library to connect with
    """

    ttl: int = REMOTE_DEFAULT_TTL
    namespace: str | None = None
    backend: CacheBackendType = CacheBackendType.MEMCACHED

    def to_log_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {"ttl": self.ttl, "backend": self.backend.value}
        if self.namespace:
            context["namespace"] = self.namespace
        return context


@runtime_checkable
class RemoteCache(Protocol):
    """
    Protocol defining the remote cache client used by the adapter.

    Implementations:
    - MemcachedRemoteCache: pymemcache HashClient across all hosts
    - RedisRemoteCache: single-endpoint redis client
    - InMemoryRemoteCache (tests): dictionary-backed fake

    Error contract:
    - CacheConnectionError: the link is unusable (network-class)
    - CacheOperationError: a single command failed, link presumed healthy
    """

    def alive(self) -> None:
        """
        Verify at least one server answers.

        Raises:
            CacheConnectionError: If no server is reachable
        """
        ...

    def get_multi(self, keys: Sequence[str]) -> dict[str, Any]:
        """
        Fetch many keys in one round trip.

        Returns:
            Dict of key → value. Keys that were not found are either omitted
            or mapped to None.
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a value under key using the connection's ttl."""
        ...

    def multi(self) -> AbstractContextManager[None]:
        """
        Group the enclosed set() calls into one network batch.

        Usage:
            with remote.multi():
                remote.set("a", 1)
                remote.set("b", 2)
        """
        ...

    def close(self) -> None:
        """Release sockets held by the client."""
        ...


# connect(hosts, options) -> verified-alive handle
RemoteCacheConnector = Callable[[Sequence[str], ConnectionOptions], RemoteCache]
