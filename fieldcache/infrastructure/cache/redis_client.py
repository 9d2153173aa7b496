"""
Redis Remote Cache

RemoteCache implementation on the synchronous redis client, for deployments
that keep record enrichment data in redis instead of memcached.

Architecture:
    RedisRemoteCache (RemoteCache protocol)
        ├── redis.Redis (own connection pool, thread-safe)
        ├── Pipeline (one round trip for multi())
        └── KeyNamespace ("<namespace>:" key prefix)

Only one endpoint is supported; CacheFilterConfig rejects more.
"""

import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from fieldcache.core.config.constants import REDIS_DEFAULT_PORT
from fieldcache.core.config.settings import get_settings
from fieldcache.core.exceptions import CacheConnectionError, CacheOperationError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions
from fieldcache.infrastructure.cache.endpoints import KeyNamespace, parse_endpoint
from fieldcache.infrastructure.cache.serialization import decode_redis_value, encode_redis_value


class RedisRemoteCache:
    """
    Redis client satisfying the RemoteCache protocol.

    get_multi → MGET (single round trip)
    multi()   → transactional pipeline flushed on block exit
    ttl       → EX on every SET; 0 stores without expiry
    """

    def __init__(self, hosts: Sequence[str], options: ConnectionOptions, client: redis.Redis | None = None):
        self._hosts = list(hosts)
        self._options = options
        self._namespace = KeyNamespace(options.namespace)
        self._batch = threading.local()

        if client is None:
            remote = get_settings().remote
            host, port = parse_endpoint(self._hosts[0], REDIS_DEFAULT_PORT)
            client = redis.Redis(
                host=host,
                port=port,
                db=remote.REDIS_DB,
                password=remote.REDIS_PASSWORD,
                socket_connect_timeout=remote.CACHE_CONNECT_TIMEOUT,
                socket_timeout=remote.CACHE_SOCKET_TIMEOUT,
                decode_responses=False,  # values are orjson bytes
            )
        self._client = client

    @contextmanager
    def _translated_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (ConnectionError, TimeoutError) as e:
            raise CacheConnectionError.from_exception(
                e, message=f"redis network error during {operation}: {e}", hosts=self._hosts
            ) from e
        except RedisError as e:
            raise CacheOperationError.from_exception(
                e, message=f"redis {operation} failed: {e}", hosts=self._hosts
            ) from e

    def _expiry(self) -> int | None:
        return self._options.ttl or None

    def alive(self) -> None:
        with self._translated_errors("ping"):
            self._client.ping()

    def get_multi(self, keys: Sequence[str]) -> dict[str, Any]:
        if not keys:
            return {}
        namespaced = self._namespace.apply_all(keys)
        with self._translated_errors("get_multi"):
            values = self._client.mget(list(namespaced))
        return {
            key: decode_redis_value(value)
            for key, value in zip(namespaced.values(), values)
            if value is not None
        }

    def set(self, key: str, value: Any) -> None:
        payload = encode_redis_value(key, value)
        pipeline = getattr(self._batch, "pipeline", None)
        if pipeline is not None:
            pipeline.set(self._namespace.apply(key), payload, ex=self._expiry())
            return
        with self._translated_errors("set"):
            self._client.set(self._namespace.apply(key), payload, ex=self._expiry())

    @contextmanager
    def multi(self) -> Iterator[None]:
        """Queue set() calls made in this thread on a pipeline and execute it once."""
        if getattr(self._batch, "pipeline", None) is not None:
            yield
            return

        pipeline = self._client.pipeline(transaction=True)
        self._batch.pipeline = pipeline
        try:
            yield
        finally:
            self._batch.pipeline = None

        try:
            if len(pipeline):
                with self._translated_errors("multi"):
                    pipeline.execute()
        finally:
            pipeline.reset()

    def close(self) -> None:
        self._client.close()
