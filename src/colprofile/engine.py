"""Single-pass column profiling.

``compute_profile`` is a plain synchronous function: it discovers the column
set, feeds every record through one accumulator per column, synthesizes the
column profiles and ranks them. Transport concerns live in
:mod:`colprofile.worker`.
"""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from colprofile.accumulator import ColumnAccumulator, init_accumulators
from colprofile.config import DEFAULT_CONFIG, ProfilerConfig
from colprofile.errors import ProfilingError
from colprofile.logical_types import detect_logical_types
from colprofile.models.profile import ColumnProfile, Profile
from colprofile.schema_validator import validate_schema_descriptor
from colprofile.scoring import build_suspicious_ranking
from colprofile.synthesizer import build_column_profile

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def resolve_top_k(value: Any, default: int = DEFAULT_CONFIG.default_top_k) -> int:
    """Return the top-K size to use for a requested value.

    Positive numbers are truncated to an integer; anything else, including
    booleans, falls back to ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return default
    if not value > 0 or not math.isfinite(value):
        return default
    return int(value)


def discover_columns(records: Iterable[Mapping[str, Any] | None]) -> list[str]:
    """Return the union of record keys in first-seen order.

    Raises:
    ------
        ProfilingError: If a record is neither a mapping nor None

    """
    columns: dict[str, None] = {}
    for index, record in enumerate(records):
        if record is None:
            continue
        if not isinstance(record, Mapping):
            msg = f"Record {index} is not a mapping: {type(record).__name__}"
            raise ProfilingError(msg)
        columns.update(dict.fromkeys(record))
    return list(columns)


def accumulate(
    records: Sequence[Mapping[str, Any] | None],
    accumulators: dict[str, ColumnAccumulator],
    config: ProfilerConfig = DEFAULT_CONFIG,
    on_progress: ProgressCallback | None = None,
) -> None:
    """Feed every record through the column accumulators."""
    total = len(records)
    for index, record in enumerate(records):
        for column, accumulator in accumulators.items():
            accumulator.update(record.get(column) if record is not None else None)

        if on_progress is not None and index % config.progress_interval == 0:
            on_progress(index + 1, total)


def compute_profile(
    records: Sequence[Mapping[str, Any] | None],
    schema: Mapping[str, Any] | None = None,
    top_k: Any = None,
    config: ProfilerConfig = DEFAULT_CONFIG,
    on_progress: ProgressCallback | None = None,
) -> Profile:
    """Profile every column of a record set.

    Args:
    ----
        records: Record mappings; None records count as null in every column
        schema: Optional schema descriptor carrying logical types
        top_k: Requested number of frequent values per column
        config: Profiler configuration
        on_progress: Called with (processed, total) every
            ``config.progress_interval`` records, starting with the first

    Returns:
    -------
        Profile with column profiles and the suspicious-column ranking

    Raises:
    ------
        ProfilingError: If the records or schema cannot be profiled

    """
    if schema and config.validate_schema:
        validate_schema_descriptor(schema)

    resolved_top_k = resolve_top_k(top_k, config.default_top_k)
    columns = discover_columns(records)
    logical_types = detect_logical_types(schema)
    accumulators = init_accumulators(columns, logical_types, config)

    logger.info(
        f"Profiling {len(records)} records across {len(columns)} columns "
        f"(top_k={resolved_top_k})"
    )

    accumulate(records, accumulators, config, on_progress)

    total = len(records)
    column_profiles: dict[str, ColumnProfile] = {
        column: build_column_profile(accumulator, total, resolved_top_k, config)
        for column, accumulator in accumulators.items()
    }
    ranking = build_suspicious_ranking(column_profiles, config.scoring)

    flagged = sum(1 for entry in ranking if entry.score > 0)
    logger.info(f"Profiled {len(column_profiles)} columns, {flagged} flagged as suspicious")

    return Profile(
        total_records=total,
        columns=column_profiles,
        suspicious_ranking=ranking,
    )


__all__ = [
    "ProgressCallback",
    "accumulate",
    "compute_profile",
    "discover_columns",
    "resolve_top_k",
]
