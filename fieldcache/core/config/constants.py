"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the field cache adapter.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Type-safe enums for state management
- Easy to update and track changes
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Record processing stages for structured logging.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    - SEQUENCE: Numeric order (0.0, 1.0, 2.0) or alphabetic prefix (CM, F)
    - DESCRIPTIVE_NAME: Clear, uppercase description with underscores

    Examples:
        stage="3.1_LOCAL_CACHE_LOOKUP"
        stage="CM_CONNECTION_MANAGER"
    """

    # Per-record lifecycle (sequential 0.0 - 4.0)
    INITIALIZATION = "0.0_INITIALIZATION"
    CONNECTION_CHECK = "1.0_CONNECTION_CHECK"
    CACHE_SET = "2.0_CACHE_SET"
    CACHE_GET = "3.0_CACHE_GET"
    LOCAL_CACHE_LOOKUP = "3.1_LOCAL_CACHE_LOOKUP"
    REMOTE_CACHE_LOOKUP = "3.2_REMOTE_CACHE_LOOKUP"
    RECORD_UPDATE = "4.0_RECORD_UPDATE"
    SHUTDOWN = "5.0_SHUTDOWN"

    # Cross-cutting concerns (alphabetic prefixes)
    CONNECTION_MANAGER = "CM_CONNECTION_MANAGER"
    FAILURE_HANDLING = "F_FAILURE_HANDLING"
    WORKER = "W_WORKER_LOOP"


# ============================================================================
# Connection States
# ============================================================================


class ConnectionStatus(str, Enum):
    """
    Remote cache connection states.

    DISCONNECTED: Before the first successful connect (connect failure is fatal)
    CONNECTED: Handle verified alive at the most recent (re)connect
    DOWN: A remote call failed or the handle was closed; reconnect pending
    """

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    DOWN = "down"


# ============================================================================
# Remote Cache Backends
# ============================================================================


class CacheBackendType(str, Enum):
    """
    Supported remote cache backends.

    MEMCACHED: pymemcache HashClient across all configured hosts
    REDIS: single-endpoint redis client
    """

    MEMCACHED = "memcached"
    REDIS = "redis"


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_HOSTS = ["localhost"]
DEFAULT_TAG_ON_FAILURE = "_memcached_failure"

MEMCACHED_DEFAULT_PORT = 11211
REDIS_DEFAULT_PORT = 6379

# Local (per-worker) cache
LOCAL_CACHE_DEFAULT_MAX_ENTRIES = 1024
LOCAL_CACHE_DEFAULT_TTL_SECONDS = 0  # 0 disables the local cache

# Remote entries: 0 means "never expire" (memcached semantics)
REMOTE_DEFAULT_TTL = 0

# Namespace separator, prepended as "<namespace>:<key>"
NAMESPACE_SEPARATOR = ":"

# Record fields
TAGS_FIELD = "tags"

