"""
Mapping Module

Key templates ↔ record field paths.
"""

from .field_key_mapper import FieldKeyMapper, KeyMapping, build_get_mappings, build_set_mappings

__all__ = [
    "FieldKeyMapper",
    "KeyMapping",
    "build_get_mappings",
    "build_set_mappings",
]
