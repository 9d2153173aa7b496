"""
Exception Module

Structured exception hierarchy for the field cache adapter.

Module Structure:
-----------------
- **base.py**: FieldCacheError base class + ConfigurationError
- **cache.py**: Remote cache exceptions (connection-class vs. operation)

Usage:
------
```python
from fieldcache.core.exceptions import CacheConnectionError, ConfigurationError
```
"""

from fieldcache.core.exceptions.base import ConfigurationError, FieldCacheError
from fieldcache.core.exceptions.cache import (
    CacheConnectionError,
    CacheError,
    CacheOperationError,
)

__all__ = [
    # Base
    "FieldCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheConnectionError",
    "CacheOperationError",
]
