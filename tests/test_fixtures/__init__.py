"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .cache_factory import (
    CacheTestFactory,
    FailingRemoteCache,
    InMemoryRemoteCache,
    ScriptedConnector,
)
from .record_factory import ConfigFactory, RecordFactory

__all__ = [
    "CacheTestFactory",
    "ConfigFactory",
    "FailingRemoteCache",
    "InMemoryRemoteCache",
    "RecordFactory",
    "ScriptedConnector",
]
