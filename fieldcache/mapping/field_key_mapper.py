"""
Field/Key Mapping

Translates between cache keys and record fields.

    get-mappings:  key-template  → destination field   ("user:%{id}" → "[profile]")
    set-mappings:  source field  → key-template        ("[name]" → "user:%{id}")

Mappings are built once from configuration into ordered, immutable tuples.
Template expansion and field access are delegated to the Record.
"""

from dataclasses import dataclass
from typing import Any

from fieldcache.core.config.filter_config import CacheFilterConfig
from fieldcache.pipeline.record import Record, parse_field_reference


@dataclass(frozen=True)
class KeyMapping:
    template: str
    field_path: str


def build_get_mappings(config: CacheFilterConfig) -> tuple[KeyMapping, ...]:
    return tuple(
        KeyMapping(template=template, field_path=field_path)
        for template, field_path in config.get_map.items()
    )


def build_set_mappings(config: CacheFilterConfig) -> tuple[KeyMapping, ...]:
    return tuple(
        KeyMapping(template=template, field_path=field_path)
        for field_path, template in config.set_map.items()
    )


class FieldKeyMapper:
    """
    Expands key templates against a record and reads/writes mapped fields.

    Stateless apart from the immutable mapping tuples.
    """

    def __init__(
        self,
        get_mappings: tuple[KeyMapping, ...] = (),
        set_mappings: tuple[KeyMapping, ...] = (),
    ):
        for mapping in (*get_mappings, *set_mappings):
            # Fail at startup on an unusable field reference
            parse_field_reference(mapping.field_path)
        self.get_mappings = tuple(get_mappings)
        self.set_mappings = tuple(set_mappings)

    @classmethod
    def from_config(cls, config: CacheFilterConfig) -> "FieldKeyMapper":
        return cls(build_get_mappings(config), build_set_mappings(config))

    @staticmethod
    def expand(template: str, record: Record) -> str:
        return record.sprintf(template)

    @staticmethod
    def read_field(record: Record, field_path: str) -> Any | None:
        return record.get(field_path)

    @staticmethod
    def write_field(record: Record, field_path: str, value: Any) -> None:
        record.set(field_path, value)

    def keys_for_get(self, record: Record) -> dict[str, str]:
        """
        Concrete key → destination field for this record.

        Templates that expand to the same key collapse into one entry; the
        later mapping wins.
        """
        return {
            self.expand(mapping.template, record): mapping.field_path
            for mapping in self.get_mappings
        }

    def values_for_set(self, record: Record) -> dict[str, Any]:
        """Concrete key → value for this record, skipping absent source fields."""
        values: dict[str, Any] = {}
        for mapping in self.set_mappings:
            value = self.read_field(record, mapping.field_path)
            if value is not None:
                values[self.expand(mapping.template, record)] = value
        return values
