"""
Value Serialization

Encodes record values for the remote store with orjson.

Memcached carries a per-item flags word, so the encoding is tagged:
- FLAG_TEXT: UTF-8 string, stored as-is (readable by any other client)
- FLAG_BYTES: raw bytes
- FLAG_JSON: any other JSON-serializable value (numbers, lists, mappings)

Redis has no flags word; values are stored as orjson documents and a value
that is not valid JSON (written by another client) is returned as text.
"""

from typing import Any

import orjson

from fieldcache.core.exceptions import CacheOperationError

FLAG_TEXT = 0
FLAG_BYTES = 1
FLAG_JSON = 2


def _dumps(key: str, value: Any) -> bytes:
    try:
        return orjson.dumps(value)
    except TypeError as e:
        raise CacheOperationError.from_exception(
            e, message=f"value for key '{key}' is not serializable", key=key
        ) from e


class OrjsonSerde:
    """
    pymemcache serde (serialize/deserialize protocol) backed by orjson.
    """

    def serialize(self, key: str, value: Any) -> tuple[bytes, int]:
        if isinstance(value, str):
            return value.encode("utf-8"), FLAG_TEXT
        if isinstance(value, bytes):
            return value, FLAG_BYTES
        return _dumps(key, value), FLAG_JSON

    def deserialize(self, key: str, value: bytes, flags: int) -> Any:
        if flags == FLAG_BYTES:
            return value
        if flags == FLAG_JSON:
            return orjson.loads(value)
        return value.decode("utf-8")


def encode_redis_value(key: str, value: Any) -> bytes:
    return _dumps(key, value)


def decode_redis_value(value: bytes | None) -> Any:
    if value is None:
        return None
    try:
        return orjson.loads(value)
    except orjson.JSONDecodeError:
        return value.decode("utf-8", errors="replace")
