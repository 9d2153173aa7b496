"""
Record

A structured unit of data flowing through the pipeline, with the field
reference and template conventions used in cache mappings:

    field reference   "name", "[name]", "[user][profile][name]"
    template          "user:%{id}", "host:%{[source][host]}"

Values substituted into templates are rendered as strings: text as-is,
mappings and sequences as JSON, other scalars with str(). A reference that
does not resolve is left in the output verbatim.
"""

import re
from typing import Any

import orjson

from fieldcache.core.config.constants import TAGS_FIELD

_FIELD_SEGMENT = re.compile(r"\[([^\[\]]+)\]")
_TEMPLATE_REFERENCE = re.compile(r"%\{([^}]+)\}")


def parse_field_reference(field_ref: str) -> tuple[str, ...]:
    """
    Split a field reference into its path segments.

    >>> parse_field_reference("[a][b]")
    ('a', 'b')
    >>> parse_field_reference("a")
    ('a',)
    """
    field_ref = field_ref.strip()
    if field_ref.startswith("["):
        segments = tuple(_FIELD_SEGMENT.findall(field_ref))
        if segments and "".join(f"[{s}]" for s in segments) == field_ref:
            return segments
    if not field_ref:
        raise ValueError("field reference cannot be empty")
    return (field_ref,)


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return orjson.dumps(value).decode("utf-8")
    return str(value)


class Record:
    """
    Dict-backed record with deep field access, tagging and a matched marker.

    Usage:
        record = Record({"id": "42"})
        record.set("[profile][name]", "Alice")
        record.get("[profile][name]")     # "Alice"
        record.sprintf("user:%{id}")      # "user:42"
        record.tag("_memcached_failure")
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})
        self.matched = False

    def get(self, field_ref: str) -> Any | None:
        node: Any = self._data
        for segment in parse_field_reference(field_ref):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    def includes(self, field_ref: str) -> bool:
        node: Any = self._data
        for segment in parse_field_reference(field_ref):
            if not isinstance(node, dict) or segment not in node:
                return False
            node = node[segment]
        return True

    def set(self, field_ref: str, value: Any) -> None:
        """Write value, creating intermediate mappings (replacing non-mapping ones)."""
        *parents, leaf = parse_field_reference(field_ref)
        node = self._data
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = value

    def sprintf(self, template: str) -> str:
        def substitute(match: re.Match) -> str:
            value = self.get(match.group(1))
            if value is None:
                return match.group(0)
            return _render(value)

        return _TEMPLATE_REFERENCE.sub(substitute, template)

    @property
    def tags(self) -> list[str]:
        tags = self._data.get(TAGS_FIELD)
        return list(tags) if isinstance(tags, list) else []

    def tag(self, tag: str) -> None:
        """Append tag to the tags list unless already present."""
        tags = self._data.get(TAGS_FIELD)
        if not isinstance(tags, list):
            tags = [] if tags is None else [tags]
            self._data[TAGS_FIELD] = tags
        if tag not in tags:
            tags.append(tag)

    def mark_matched(self) -> None:
        self.matched = True

    def to_dict(self) -> dict[str, Any]:
        return self._data

    def __repr__(self) -> str:
        return f"Record({self._data!r}, matched={self.matched})"
