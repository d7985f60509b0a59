"""Value classification and canonicalization.

Every non-null value is classified once into a ``TypeCategory`` and turned
into a bounded canonical string used as its frequency key.
"""

from __future__ import annotations

import json
import math
import numbers
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

UNSTRINGIFIABLE = "[Unstringifiable]"
ELLIPSIS = "…"
DEFAULT_MAX_VALUE_LENGTH = 200


class TypeCategory(str, Enum):
    """Coarse type of a non-null value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    OTHER = "other"


def is_null(value: Any) -> bool:
    """Return True for null/absent values."""
    return value is None


def classify_value(value: Any) -> TypeCategory:
    """Classify a non-null value into exactly one type category.

    Booleans are checked before numbers and arrays before objects.
    """
    if isinstance(value, bool):
        return TypeCategory.BOOLEAN
    if isinstance(value, str):
        return TypeCategory.STRING
    if isinstance(value, numbers.Real | Decimal):
        return TypeCategory.NUMBER
    if isinstance(value, list | tuple):
        return TypeCategory.ARRAY
    if isinstance(value, Mapping):
        return TypeCategory.OBJECT
    return TypeCategory.OTHER


def finite_number(value: Any) -> int | float | None:
    """Return the value as a plain number if it is finite numeric, else None."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real | Decimal):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _json_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def safe_stringify(value: Any) -> str:
    """Serialize an array or mapping to compact JSON.

    Mappings other than ``dict`` are serialized as objects. Cyclic or
    non-serializable structures yield the ``[Unstringifiable]`` sentinel
    instead of raising.
    """
    try:
        return json.dumps(
            value, ensure_ascii=False, separators=(",", ":"), default=_json_default
        )
    except (TypeError, ValueError, RecursionError):
        return UNSTRINGIFIABLE


def normalize_value(value: Any) -> str | None:
    """Return the canonical text of a value, or None for null values."""
    if is_null(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple | Mapping):
        return safe_stringify(value)
    return str(value)


def truncate_value(value: str, max_length: int = DEFAULT_MAX_VALUE_LENGTH) -> str:
    """Cut text longer than ``max_length`` and mark it with an ellipsis."""
    if len(value) <= max_length:
        return value
    return f"{value[:max_length]}{ELLIPSIS}"


def frequency_key(
    value: Any, max_length: int = DEFAULT_MAX_VALUE_LENGTH
) -> str | None:
    """Return the bounded frequency key of a value, or None for null values."""
    normalized = normalize_value(value)
    if normalized is None:
        return None
    return truncate_value(normalized, max_length)


__all__ = [
    "ELLIPSIS",
    "UNSTRINGIFIABLE",
    "TypeCategory",
    "classify_value",
    "finite_number",
    "frequency_key",
    "is_null",
    "normalize_value",
    "safe_stringify",
    "truncate_value",
]
