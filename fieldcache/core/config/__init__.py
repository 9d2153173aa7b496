"""
Configuration Module

Components:
-----------
- **settings.py**: Pydantic settings loaded from environment / .env
  (logging, remote client timeouts)
- **filter_config.py**: Validated per-filter configuration (hosts, mappings, ttl)
- **constants.py**: System-wide constants and enums (Stage, ConnectionStatus, ...)

Usage:
------
```python
from fieldcache.core.config import get_settings
from fieldcache.core.config.filter_config import CacheFilterConfig

settings = get_settings()
config = CacheFilterConfig.from_dict({"get": {"user:%{id}": "[profile]"}})
```

Testing:
-------
```python
import os
from fieldcache.core.config import reload_settings

os.environ["LOG_LEVEL"] = "DEBUG"
settings = reload_settings()
```
"""

from fieldcache.core.config.constants import (
    DEFAULT_HOSTS,
    DEFAULT_TAG_ON_FAILURE,
    LOCAL_CACHE_DEFAULT_MAX_ENTRIES,
    LOCAL_CACHE_DEFAULT_TTL_SECONDS,
    MEMCACHED_DEFAULT_PORT,
    NAMESPACE_SEPARATOR,
    REDIS_DEFAULT_PORT,
    REMOTE_DEFAULT_TTL,
    CacheBackendType,
    ConnectionStatus,
    Stage,
)
from fieldcache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "ConnectionStatus",
    "CacheBackendType",
    # Defaults
    "DEFAULT_HOSTS",
    "DEFAULT_TAG_ON_FAILURE",
    "LOCAL_CACHE_DEFAULT_MAX_ENTRIES",
    "LOCAL_CACHE_DEFAULT_TTL_SECONDS",
    "MEMCACHED_DEFAULT_PORT",
    "NAMESPACE_SEPARATOR",
    "REDIS_DEFAULT_PORT",
    "REMOTE_DEFAULT_TTL",
]
