"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import (  # noqa: E402
    CacheTestFactory,
    ConfigFactory,
    InMemoryRemoteCache,
    RecordFactory,
)


# ============================================================================
# Settings Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild the settings singleton after each test so env patches never leak."""
    yield
    from fieldcache.core.config.settings import reload_settings

    reload_settings()


# ============================================================================
# Environment-Based Integration Toggles
# ============================================================================


@pytest.fixture(scope="session")
def use_real_memcached():
    """Check if a real memcached should be used for integration tests."""
    return os.getenv("USE_REAL_MEMCACHED", "0").lower() in ("1", "true", "yes")


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if a real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Remote Cache Fixtures
# ============================================================================


@pytest.fixture
def remote_cache() -> InMemoryRemoteCache:
    """Empty in-memory RemoteCache."""
    return CacheTestFactory.remote_with_data()


@pytest.fixture
def connector(remote_cache):
    """Connector that always hands out the remote_cache fixture."""
    return CacheTestFactory.connector(remote_cache)


# ============================================================================
# Orchestrator Fixtures
# ============================================================================


@pytest.fixture
def make_orchestrator(connector):
    """
    Build and start an orchestrator from config overrides.

    Usage:
        orchestrator = make_orchestrator(get={"user:%{id}": "[profile]"})
    """
    from fieldcache.pipeline.orchestrator import CacheOrchestrator

    created = []

    def _make(connector_override=None, **overrides):
        orchestrator = CacheOrchestrator(
            ConfigFactory.create(**overrides), connector=connector_override or connector
        )
        orchestrator.start()
        created.append(orchestrator)
        return orchestrator

    yield _make

    for orchestrator in created:
        orchestrator.shutdown()


@pytest.fixture
def record_factory():
    return RecordFactory
