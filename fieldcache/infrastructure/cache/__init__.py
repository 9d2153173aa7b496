"""
Cache Module

Provides the per-worker local cache, the remote cache backends
(memcached, redis) and the connection manager guarding them.
"""

from .connection_manager import ConnectionManager
from .factory import connect_remote_cache
from .local_cache import LocalCache, LocalCacheEntry
from .memcached_client import MemcachedRemoteCache
from .redis_client import RedisRemoteCache

__all__ = [
    "ConnectionManager",
    "LocalCache",
    "LocalCacheEntry",
    "MemcachedRemoteCache",
    "RedisRemoteCache",
    "connect_remote_cache",
]
