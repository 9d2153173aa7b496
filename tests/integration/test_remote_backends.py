"""
Integration Tests against real cache servers

Run with a local memcached / redis:
    USE_REAL_MEMCACHED=1 pytest -m integration
    USE_REAL_REDIS=1 pytest -m integration

Server addresses default to localhost and can be overridden with
MEMCACHED_HOST / REDIS_HOST.
"""

import os
import uuid

import pytest

from fieldcache.core.config.constants import CacheBackendType
from fieldcache.core.exceptions import CacheConnectionError
from fieldcache.core.interfaces.remote_cache import ConnectionOptions
from fieldcache.infrastructure.cache.factory import connect_remote_cache
from fieldcache.pipeline.orchestrator import CacheOrchestrator
from fieldcache.pipeline.record import Record
from fieldcache.pipeline.runner import PipelineRunner
from tests.test_fixtures import ConfigFactory

MEMCACHED_HOST = os.getenv("MEMCACHED_HOST", "localhost:11211")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost:6379")


@pytest.fixture(params=[CacheBackendType.MEMCACHED, CacheBackendType.REDIS])
def backend(request, use_real_memcached, use_real_redis):
    if request.param == CacheBackendType.MEMCACHED and not use_real_memcached:
        pytest.skip("set USE_REAL_MEMCACHED=1 to run against memcached")
    if request.param == CacheBackendType.REDIS and not use_real_redis:
        pytest.skip("set USE_REAL_REDIS=1 to run against redis")
    host = MEMCACHED_HOST if request.param == CacheBackendType.MEMCACHED else REDIS_HOST
    return request.param, host


@pytest.fixture
def namespace():
    return f"it-{uuid.uuid4().hex[:8]}"


@pytest.mark.integration
class TestRemoteBackends:
    """Round trips through a real server."""

    def test_set_then_get_multi(self, backend, namespace):
        backend_type, host = backend
        remote = connect_remote_cache([host], ConnectionOptions(ttl=30, namespace=namespace, backend=backend_type))
        try:
            with remote.multi():
                remote.set("text", "Alice")
                remote.set("doc", {"roles": ["admin"]})

            assert remote.get_multi(["text", "doc", "missing"]) == {
                "text": "Alice",
                "doc": {"roles": ["admin"]},
            }
        finally:
            remote.close()

    def test_orchestrator_round_trip(self, backend, namespace):
        backend_type, host = backend
        config = ConfigFactory.create(
            hosts=[host],
            backend=backend_type.value,
            namespace=namespace,
            ttl=30,
            set={"[name]": "user:%{id}"},
            get={"user:%{id}": "[profile]"},
        )
        writers = [Record({"id": str(index), "name": f"user-{index}"}) for index in range(20)]
        readers = [Record({"id": str(index)}) for index in range(20)]

        with CacheOrchestrator(config) as orchestrator:
            runner = PipelineRunner(orchestrator, workers=4)
            runner.run(writers)
            runner.run(readers)

        assert [record.get("profile") for record in readers] == [f"user-{index}" for index in range(20)]
        assert all(record.matched and record.tags == [] for record in readers)


@pytest.mark.integration
def test_unreachable_server_fails_connect(use_real_memcached):
    if not use_real_memcached:
        pytest.skip("set USE_REAL_MEMCACHED=1 to run against memcached")

    with pytest.raises(CacheConnectionError):
        connect_remote_cache(["127.0.0.1:1"], ConnectionOptions())
