"""
Unit Tests for the remote cache factory
"""

from unittest.mock import MagicMock, patch

import pytest

from fieldcache.core.config.constants import CacheBackendType
from fieldcache.core.exceptions import CacheConnectionError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions
from fieldcache.infrastructure.cache import factory
from fieldcache.infrastructure.cache.factory import connect_remote_cache


@pytest.fixture
def backends():
    memcached_cls, redis_cls = MagicMock(), MagicMock()
    with patch.dict(
        factory._BACKENDS,
        {CacheBackendType.MEMCACHED: memcached_cls, CacheBackendType.REDIS: redis_cls},
    ):
        yield memcached_cls, redis_cls


@pytest.mark.unit
class TestConnectRemoteCache:
    """Test backend selection and liveness verification."""

    def test_memcached_backend(self, backends):
        memcached_cls, redis_cls = backends
        options = ConnectionOptions(ttl=10)

        remote = connect_remote_cache(["localhost"], options)

        memcached_cls.assert_called_once_with(["localhost"], options)
        redis_cls.assert_not_called()
        remote.alive.assert_called_once()

    def test_redis_backend(self, backends):
        _, redis_cls = backends

        remote = connect_remote_cache(["redis"], ConnectionOptions(backend=CacheBackendType.REDIS))

        assert remote is redis_cls.return_value

    def test_dead_remote_is_closed_and_error_raised(self, backends):
        memcached_cls, _ = backends
        handle = memcached_cls.return_value
        handle.alive.side_effect = CacheConnectionError("no server")

        with pytest.raises(CacheConnectionError):
            connect_remote_cache(["localhost"], ConnectionOptions())

        handle.close.assert_called_once()

    def test_close_failure_does_not_mask_error(self, backends):
        memcached_cls, _ = backends
        handle = memcached_cls.return_value
        handle.alive.side_effect = CacheConnectionError("no server")
        handle.close.side_effect = OSError("already closed")

        with pytest.raises(CacheConnectionError, match="no server"):
            connect_remote_cache(["localhost"], ConnectionOptions())
