"""Turn column accumulators into read-only column profiles."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from colprofile.config import DEFAULT_CONFIG, ProfilerConfig
from colprofile.errors import ProfilingError
from colprofile.logical_types import is_timestamp
from colprofile.models.profile import ColumnProfile, TopKEntry

if TYPE_CHECKING:
    from colprofile.accumulator import ColumnAccumulator

logger = logging.getLogger(__name__)

TYPE_HINT_DATETIME = "datetime"
TYPE_HINT_MIXED = "mixed"
TYPE_HINT_UNKNOWN = "unknown"

REASON_MIXED = "mixed types, so no min/max computed"
REASON_NOT_NUMERIC = "not a numeric column, so no min/max computed"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def format_timestamp(millis: float) -> str:
    """Render epoch milliseconds as an ISO 8601 UTC timestamp.

    Raises:
    ------
        ProfilingError: If the value is outside the representable range

    """
    try:
        instant = _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        msg = f"Invalid time value: {millis}"
        raise ProfilingError(msg) from e
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def compute_type_hint(
    accumulator: ColumnAccumulator, config: ProfilerConfig = DEFAULT_CONFIG
) -> str:
    """Return the column's type hint."""
    total = accumulator.non_null_count
    if not total:
        return TYPE_HINT_UNKNOWN
    if is_timestamp(accumulator.logical_type):
        return TYPE_HINT_DATETIME

    # sorted() is stable, so ties resolve in category declaration order
    ranked = sorted(accumulator.type_counts.items(), key=lambda item: -item[1])
    top_type, top_count = ranked[0]
    if top_count / total >= config.type_hint_threshold:
        return top_type.value
    return TYPE_HINT_MIXED


def compute_top_k(accumulator: ColumnAccumulator, top_k: int) -> list[TopKEntry]:
    """Return the ``top_k`` most frequent values with their rates."""
    non_null = accumulator.non_null_count
    return [
        TopKEntry(value=value, count=count, rate=count / non_null if non_null else 0)
        for value, count in accumulator.frequencies.most_common(top_k)
    ]


def _min_max_fields(
    accumulator: ColumnAccumulator,
    numeric_ratio: float,
    config: ProfilerConfig,
) -> dict[str, Any]:
    eligible = numeric_ratio >= config.numeric_threshold
    fields: dict[str, Any] = {}

    if eligible and is_timestamp(accumulator.logical_type):
        if accumulator.temporal_min is not None and accumulator.temporal_max is not None:
            fields["min"] = accumulator.temporal_min
            fields["max"] = accumulator.temporal_max
            fields["min_display"] = format_timestamp(accumulator.temporal_min)
            fields["max_display"] = format_timestamp(accumulator.temporal_max)
            return fields
    elif eligible:
        if accumulator.numeric_min is not None and accumulator.numeric_max is not None:
            fields["min"] = accumulator.numeric_min
            fields["max"] = accumulator.numeric_max
            return fields

    if accumulator.non_null_count > 0:
        fields["min_max_reason"] = REASON_MIXED if numeric_ratio > 0 else REASON_NOT_NUMERIC
    return fields


def build_column_profile(
    accumulator: ColumnAccumulator,
    total_records: int,
    top_k: int,
    config: ProfilerConfig = DEFAULT_CONFIG,
) -> ColumnProfile:
    """Synthesize the profile of one column.

    Args:
    ----
        accumulator: Accumulator that consumed every record of the run
        total_records: Number of records in the run
        top_k: Maximum number of frequent values to report
        config: Profiler configuration

    Returns:
    -------
        ColumnProfile for the column

    """
    non_null = accumulator.non_null_count
    null_rate = accumulator.null_count / total_records if total_records else 0
    numeric_ratio = accumulator.numeric_count / non_null if non_null else 0
    top_values = compute_top_k(accumulator, top_k)
    extrema = _min_max_fields(accumulator, numeric_ratio, config)

    min_max_flat = (
        extrema.get("min") is not None
        and extrema.get("max") is not None
        and extrema["min"] == extrema["max"]
    )

    profile = ColumnProfile(
        type_hint=compute_type_hint(accumulator, config),
        null_count=accumulator.null_count,
        null_rate=null_rate,
        non_null_count=non_null,
        numeric_ratio=numeric_ratio,
        top_k=top_values,
        top_k_limited=accumulator.overflowed,
        top1_rate=top_values[0].rate if top_values else 0,
        min_max_flat=min_max_flat,
        **extrema,
    )
    logger.debug(
        f"Column {accumulator.name}: type={profile.type_hint}, "
        f"null_rate={null_rate:.2%}, distinct={len(accumulator.frequencies)}"
    )
    return profile


__all__ = [
    "REASON_MIXED",
    "REASON_NOT_NUMERIC",
    "TYPE_HINT_DATETIME",
    "TYPE_HINT_MIXED",
    "TYPE_HINT_UNKNOWN",
    "build_column_profile",
    "compute_top_k",
    "compute_type_hint",
    "format_timestamp",
]
