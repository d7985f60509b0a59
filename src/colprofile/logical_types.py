"""Logical type resolution for schema descriptors.

A schema descriptor lists fields whose type definitions may be unions
(lists of alternatives) or nested annotated types carrying a ``logicalType``.
"""

from collections.abc import Mapping
from typing import Any

TIMESTAMP_MILLIS = "timestamp-millis"
TIMESTAMP_MICROS = "timestamp-micros"

# Logical type -> divisor that converts a raw value to milliseconds
TIMESTAMP_UNITS = {
    TIMESTAMP_MILLIS: 1,
    TIMESTAMP_MICROS: 1000,
}


def extract_logical_type(type_def: Any) -> str | None:
    """Return the first logical type found depth-first in a type definition.

    Args:
    ----
        type_def: A type name, a union (list of type definitions) or a nested
            type mapping

    Returns:
    -------
        The logical type tag, or None if no tag exists

    """
    if not type_def:
        return None
    if isinstance(type_def, list | tuple):
        for item in type_def:
            logical = extract_logical_type(item)
            if logical:
                return logical
        return None
    if isinstance(type_def, Mapping):
        if type_def.get("logicalType"):
            return type_def["logicalType"]
        return extract_logical_type(type_def.get("type"))
    return None


def detect_logical_types(schema: Mapping[str, Any] | None) -> dict[str, str]:
    """Map field names to their logical type tags.

    Fields without a tag are omitted. A missing schema or a schema without a
    field list yields an empty mapping.

    Args:
    ----
        schema: Schema descriptor with a ``fields`` list, or None

    Returns:
    -------
        Dictionary of field name to logical type tag

    """
    logical_types: dict[str, str] = {}
    if not schema or not isinstance(schema.get("fields"), list):
        return logical_types

    for field in schema["fields"]:
        logical_type = extract_logical_type(field.get("type"))
        if logical_type:
            logical_types[field["name"]] = logical_type
    return logical_types


def is_timestamp(logical_type: str | None) -> bool:
    """Return True for the timestamp logical types."""
    return logical_type in TIMESTAMP_UNITS


def to_millis(value: float, logical_type: str) -> float | None:
    """Convert a raw timestamp value to milliseconds since the epoch.

    Returns None when the converted value does not fit in a float.
    """
    unit = TIMESTAMP_UNITS[logical_type]
    if unit == 1:
        return value
    try:
        return value / unit
    except OverflowError:
        return None
