"""
Core Module

Foundational components: configuration, logging, exceptions, and interfaces.
"""

from .exceptions import (
    CacheConnectionError,
    CacheError,
    CacheOperationError,
    ConfigurationError,
    FieldCacheError,
)
from .logging import (
    clear_worker_id,
    get_logger,
    get_worker_id,
    log_stage,
    set_worker_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_worker_id",
    "get_worker_id",
    "clear_worker_id",
    "log_stage",
    "FieldCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheOperationError",
]
