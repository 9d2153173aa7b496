"""
Cache-Related Exceptions

All exceptions related to remote cache operations (memcached, redis).
"""

from fieldcache.core.exceptions.base import FieldCacheError


class CacheError(FieldCacheError):
    """Base exception for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """
    Raised when the remote cache link itself is unusable.

    Common causes:
    - Server is down or refusing connections
    - Every server in the hash ring has been marked dead
    - Socket timeout or unexpected close mid-command
    - Authentication failure on connect

    The orchestrator treats this as connection-class: the record is tagged,
    the connection is marked down and closed, and the next record triggers a
    reconnect.
    """
    pass


class CacheOperationError(CacheError):
    """
    Raised when a remote cache command fails without implying a dead link.

    Common causes:
    - Illegal key (too long, contains whitespace)
    - Value cannot be serialized
    - Server-side error reply for a single command
    """
    pass
