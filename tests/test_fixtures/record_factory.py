"""
Record Test Factory

Builds records and filter configurations with sensible defaults.
"""

from typing import Any

from fieldcache.core.config.filter_config import CacheFilterConfig
from fieldcache.pipeline.record import Record


class RecordFactory:
    """Factory for creating test records."""

    @staticmethod
    def create(**fields: Any) -> Record:
        return Record(dict(fields))

    @staticmethod
    def user(user_id: str = "42", **extra: Any) -> Record:
        return Record({"id": user_id, **extra})

    @staticmethod
    def batch(count: int, prefix: str = "u") -> list[Record]:
        return [Record({"id": f"{prefix}{index}", "seq": index}) for index in range(count)]


class ConfigFactory:
    """Factory for creating filter configurations."""

    @staticmethod
    def create(**overrides: Any) -> CacheFilterConfig:
        raw: dict[str, Any] = {"hosts": ["localhost"]}
        raw.update(overrides)
        return CacheFilterConfig.from_dict(raw)

    @staticmethod
    def get_only(template: str = "user:%{id}", field: str = "[profile]", **overrides: Any) -> CacheFilterConfig:
        return ConfigFactory.create(get={template: field}, **overrides)

    @staticmethod
    def set_only(field: str = "[name]", template: str = "user:%{id}", **overrides: Any) -> CacheFilterConfig:
        return ConfigFactory.create(set={field: template}, **overrides)
