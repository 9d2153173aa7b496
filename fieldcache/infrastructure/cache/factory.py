"""
Remote cache factory.

Builds the backend named by ConnectionOptions.backend and verifies it is
alive before handing it out. This is the default connector used by
ConnectionManager for the initial connect and every reconnect.
"""

from collections.abc import Sequence
from contextlib import suppress

from fieldcache.core.config.constants import CacheBackendType, Stage
from fieldcache.core.exceptions import CacheConnectionError, ConfigurationError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions, RemoteCache
from fieldcache.core.logging.logger import get_logger, log_stage
from fieldcache.infrastructure.cache.memcached_client import MemcachedRemoteCache
from fieldcache.infrastructure.cache.redis_client import RedisRemoteCache

logger = get_logger(__name__)

_BACKENDS = {
    CacheBackendType.MEMCACHED: MemcachedRemoteCache,
    CacheBackendType.REDIS: RedisRemoteCache,
}


def connect_remote_cache(hosts: Sequence[str], options: ConnectionOptions) -> RemoteCache:
    """
    Create a remote cache handle and verify liveness.

    Raises:
        ConfigurationError: If the backend is unknown
        CacheConnectionError: If no server answers
    """
    backend_cls = _BACKENDS.get(options.backend)
    if backend_cls is None:
        raise ConfigurationError(
            f"unsupported cache backend '{options.backend}'",
            details={"supported": [b.value for b in _BACKENDS]},
        )

    log_stage(
        logger,
        Stage.CONNECTION_MANAGER,
        "connecting to remote cache",
        level="debug",
        hosts=list(hosts),
        **options.to_log_context(),
    )

    remote = backend_cls(hosts, options)
    try:
        remote.alive()
    except CacheConnectionError:
        with suppress(Exception):
            remote.close()
        raise
    return remote
