"""
Memcached Remote Cache

RemoteCache implementation on pymemcache's HashClient, distributing keys
across every configured host with consistent hashing.

Architecture:
    MemcachedRemoteCache (RemoteCache protocol)
        ├── HashClient (pymemcache, pooled per server, thread-safe)
        ├── OrjsonSerde (value encoding with memcached flags)
        └── KeyNamespace ("<namespace>:" key prefix)

Error translation:
    OSError, unexpected close, empty ring  → CacheConnectionError
    client/server error replies             → CacheOperationError
"""

import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from pymemcache.client.hash import HashClient
from pymemcache.exceptions import (
    MemcacheClientError,
    MemcacheError,
    MemcacheServerError,
    MemcacheUnexpectedCloseError,
    MemcacheUnknownError,
)

from fieldcache.core.config.constants import MEMCACHED_DEFAULT_PORT
from fieldcache.core.config.settings import get_settings
from fieldcache.core.exceptions import CacheConnectionError, CacheOperationError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions
from fieldcache.core.logging.logger import get_logger
from fieldcache.infrastructure.cache.endpoints import KeyNamespace, parse_endpoint
from fieldcache.infrastructure.cache.serialization import OrjsonSerde

logger = get_logger(__name__)


class MemcachedRemoteCache:
    """
    Memcached client satisfying the RemoteCache protocol.

    The handle is shared by every worker. HashClient runs with per-server
    connection pools, and the multi() batch buffer is thread-local, so
    concurrent workers never see each other's pending sets.
    """

    def __init__(self, hosts: Sequence[str], options: ConnectionOptions, client: HashClient | None = None):
        """
        Args:
            hosts: Endpoint strings, e.g. ["localhost", "cache-2:11211"]
            options: ttl / namespace applied to every key
            client: Pre-built HashClient (tests); built from settings otherwise
        """
        self._hosts = list(hosts)
        self._options = options
        self._namespace = KeyNamespace(options.namespace)
        self._batch = threading.local()

        if client is None:
            remote = get_settings().remote
            client = HashClient(
                [parse_endpoint(host, MEMCACHED_DEFAULT_PORT) for host in self._hosts],
                serde=OrjsonSerde(),
                connect_timeout=remote.CACHE_CONNECT_TIMEOUT,
                timeout=remote.CACHE_SOCKET_TIMEOUT,
                retry_attempts=remote.MEMCACHED_RETRY_ATTEMPTS,
                dead_timeout=remote.MEMCACHED_DEAD_TIMEOUT,
                use_pooling=True,
                ignore_exc=False,
                allow_unicode_keys=True,
            )
        self._client = client

    @contextmanager
    def _translated_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except MemcacheUnexpectedCloseError as e:
            raise CacheConnectionError.from_exception(
                e, message=f"memcached closed the connection during {operation}", hosts=self._hosts
            ) from e
        except (MemcacheClientError, MemcacheServerError, MemcacheUnknownError) as e:
            raise CacheOperationError.from_exception(
                e, message=f"memcached {operation} failed: {e}", hosts=self._hosts
            ) from e
        except MemcacheError as e:
            # Raised by HashClient when every server has been marked dead
            raise CacheConnectionError.from_exception(
                e, message=f"no memcached server available for {operation}", hosts=self._hosts
            ) from e
        except OSError as e:
            raise CacheConnectionError.from_exception(
                e, message=f"memcached network error during {operation}: {e}", hosts=self._hosts
            ) from e

    def alive(self) -> None:
        """
        Verify that at least one server answers a version command.

        Raises:
            CacheConnectionError: If no server answers
        """
        last_error: Exception | None = None
        for server, client in list(self._client.clients.items()):
            try:
                client.version()
                return
            except (MemcacheError, OSError) as e:
                last_error = e
                logger.debug("memcached server not answering", server=server, error=str(e))

        raise CacheConnectionError(
            "no memcached server is alive",
            details={"hosts": self._hosts, "last_error": str(last_error) if last_error else None},
        )

    def get_multi(self, keys: Sequence[str]) -> dict[str, Any]:
        if not keys:
            return {}
        namespaced = self._namespace.apply_all(keys)
        with self._translated_errors("get_multi"):
            found = self._client.get_many(list(namespaced))
        return {namespaced[key]: value for key, value in found.items() if key in namespaced}

    def set(self, key: str, value: Any) -> None:
        pending = getattr(self._batch, "values", None)
        if pending is not None:
            pending[self._namespace.apply(key)] = value
            return
        with self._translated_errors("set"):
            stored = self._client.set(
                self._namespace.apply(key), value, expire=self._options.ttl, noreply=False
            )
        if stored is False:
            raise CacheOperationError("memcached did not store the value", details={"key": key})

    @contextmanager
    def multi(self) -> Iterator[None]:
        """Buffer set() calls made in this thread and send them as one set_many."""
        if getattr(self._batch, "values", None) is not None:
            # Nested multi joins the outer batch
            yield
            return

        self._batch.values = {}
        try:
            yield
            pending = self._batch.values
        finally:
            self._batch.values = None

        if not pending:
            return
        with self._translated_errors("multi"):
            failed = self._client.set_many(pending, expire=self._options.ttl, noreply=False)
        if failed:
            raise CacheOperationError(
                "memcached did not store every value in the batch",
                details={"failed_keys": list(failed)},
            )

    def close(self) -> None:
        self._client.close()
