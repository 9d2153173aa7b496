"""
Unit Tests for MemcachedRemoteCache

The pymemcache HashClient is replaced with a MagicMock; these tests cover
key namespacing, batching and error translation.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
from pymemcache.exceptions import (
    MemcacheError,
    MemcacheIllegalInputError,
    MemcacheServerError,
    MemcacheUnexpectedCloseError,
)

from fieldcache.core.exceptions import CacheConnectionError, CacheOperationError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions
from fieldcache.infrastructure.cache.memcached_client import MemcachedRemoteCache
from fieldcache.infrastructure.cache.serialization import OrjsonSerde


@pytest.fixture
def hash_client():
    client = MagicMock()
    client.clients = {"127.0.0.1:11211": MagicMock()}
    client.get_many.return_value = {}
    client.set.return_value = True
    client.set_many.return_value = []
    return client


@pytest.fixture
def memcached(hash_client):
    return MemcachedRemoteCache(
        ["127.0.0.1"], ConnectionOptions(ttl=30, namespace="ns"), client=hash_client
    )


@pytest.mark.unit
class TestConstruction:
    """Test HashClient construction from settings."""

    def test_builds_pooled_hash_client(self):
        with patch("fieldcache.infrastructure.cache.memcached_client.HashClient") as hash_client_cls:
            MemcachedRemoteCache(["cache-1", "[::1]:11311"], ConnectionOptions())

        servers = hash_client_cls.call_args[0][0]
        kwargs = hash_client_cls.call_args[1]
        assert servers == [("cache-1", 11211), ("::1", 11311)]
        assert kwargs["use_pooling"] is True
        assert kwargs["ignore_exc"] is False
        assert isinstance(kwargs["serde"], OrjsonSerde)


@pytest.mark.unit
class TestAlive:
    """Test the version-based liveness check."""

    def test_alive_when_a_server_answers(self, memcached, hash_client):
        memcached.alive()
        hash_client.clients["127.0.0.1:11211"].version.assert_called_once()

    def test_alive_tries_every_server(self, hash_client):
        down, up = MagicMock(), MagicMock()
        down.version.side_effect = ConnectionRefusedError("refused")
        hash_client.clients = {"a:11211": down, "b:11211": up}
        cache = MemcachedRemoteCache(["a", "b"], ConnectionOptions(), client=hash_client)

        cache.alive()

        up.version.assert_called_once()

    def test_not_alive_when_no_server_answers(self, memcached, hash_client):
        hash_client.clients["127.0.0.1:11211"].version.side_effect = OSError("refused")

        with pytest.raises(CacheConnectionError) as exc_info:
            memcached.alive()

        assert exc_info.value.details["last_error"] == "refused"

    def test_not_alive_with_empty_ring(self, memcached, hash_client):
        hash_client.clients = {}
        with pytest.raises(CacheConnectionError):
            memcached.alive()


@pytest.mark.unit
class TestGetMulti:
    """Test batched lookups."""

    def test_namespaced_lookup_returns_caller_keys(self, memcached, hash_client):
        hash_client.get_many.return_value = {"ns:a": "1"}

        result = memcached.get_multi(["a", "b"])

        hash_client.get_many.assert_called_once_with(["ns:a", "ns:b"])
        assert result == {"a": "1"}

    def test_empty_keys_skip_the_network(self, memcached, hash_client):
        assert memcached.get_multi([]) == {}
        hash_client.get_many.assert_not_called()


@pytest.mark.unit
class TestSet:
    """Test single and batched writes."""

    def test_set_outside_multi(self, memcached, hash_client):
        memcached.set("k", {"v": 1})

        hash_client.set.assert_called_once_with("ns:k", {"v": 1}, expire=30, noreply=False)

    def test_set_not_stored(self, memcached, hash_client):
        hash_client.set.return_value = False

        with pytest.raises(CacheOperationError):
            memcached.set("k", "v")

    def test_multi_sends_one_batch(self, memcached, hash_client):
        with memcached.multi():
            memcached.set("a", "1")
            memcached.set("b", "2")
            hash_client.set_many.assert_not_called()

        hash_client.set.assert_not_called()
        hash_client.set_many.assert_called_once_with(
            {"ns:a": "1", "ns:b": "2"}, expire=30, noreply=False
        )

    def test_empty_multi_sends_nothing(self, memcached, hash_client):
        with memcached.multi():
            pass
        hash_client.set_many.assert_not_called()

    def test_nested_multi_joins_outer_batch(self, memcached, hash_client):
        with memcached.multi():
            memcached.set("a", "1")
            with memcached.multi():
                memcached.set("b", "2")

        hash_client.set_many.assert_called_once()
        assert hash_client.set_many.call_args[0][0] == {"ns:a": "1", "ns:b": "2"}

    def test_exception_in_block_discards_batch(self, memcached, hash_client):
        with pytest.raises(RuntimeError):
            with memcached.multi():
                memcached.set("a", "1")
                raise RuntimeError("boom")

        hash_client.set_many.assert_not_called()
        memcached.set("b", "2")
        hash_client.set.assert_called_once()

    def test_failed_keys_raise(self, memcached, hash_client):
        hash_client.set_many.return_value = ["ns:a"]

        with pytest.raises(CacheOperationError) as exc_info:
            with memcached.multi():
                memcached.set("a", "1")

        assert exc_info.value.details["failed_keys"] == ["ns:a"]

    def test_batch_is_per_thread(self, memcached, hash_client):
        with memcached.multi():
            thread = threading.Thread(target=memcached.set, args=("other", "x"))
            thread.start()
            thread.join()
            memcached.set("mine", "y")

        hash_client.set.assert_called_once_with("ns:other", "x", expire=30, noreply=False)
        assert hash_client.set_many.call_args[0][0] == {"ns:mine": "y"}


@pytest.mark.unit
class TestErrorTranslation:
    """Test library exception classification."""

    @pytest.mark.parametrize(
        "error",
        [
            MemcacheUnexpectedCloseError(),
            ConnectionResetError("reset"),
            TimeoutError("timed out"),
            MemcacheError("All servers seem to be down right now"),
        ],
    )
    def test_connection_class_errors(self, memcached, hash_client, error):
        hash_client.get_many.side_effect = error

        with pytest.raises(CacheConnectionError):
            memcached.get_multi(["a"])

    @pytest.mark.parametrize(
        "error", [MemcacheServerError("SERVER_ERROR out of memory"), MemcacheIllegalInputError("bad key")]
    )
    def test_operation_class_errors(self, memcached, hash_client, error):
        hash_client.set.side_effect = error

        with pytest.raises(CacheOperationError):
            memcached.set("a", "1")

    def test_batch_flush_errors_are_translated(self, memcached, hash_client):
        hash_client.set_many.side_effect = OSError("broken pipe")

        with pytest.raises(CacheConnectionError):
            with memcached.multi():
                memcached.set("a", "1")


@pytest.mark.unit
def test_close_closes_client(memcached, hash_client):
    memcached.close()
    hash_client.close.assert_called_once()
