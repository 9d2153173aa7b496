"""
Core Interfaces Module

Protocols for the external collaborators of the field cache adapter.

Components:
-----------
- **remote_cache.py**: RemoteCache protocol, ConnectionOptions, connector type
"""

from fieldcache.core.interfaces.remote_cache import (
    ConnectionOptions,
    RemoteCache,
    RemoteCacheConnector,
)

__all__ = [
    "ConnectionOptions",
    "RemoteCache",
    "RemoteCacheConnector",
]
