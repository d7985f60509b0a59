"""Per-column single-pass accumulation."""

from __future__ import annotations

import logging
from typing import Any

from colprofile.config import DEFAULT_CONFIG, ProfilerConfig
from colprofile.logical_types import is_timestamp, to_millis
from colprofile.normalize import (
    TypeCategory,
    classify_value,
    finite_number,
    frequency_key,
    is_null,
)

logger = logging.getLogger(__name__)


class FrequencyTable:
    """Bounded value -> count map with a sticky overflow state.

    While open, unseen keys are admitted until ``capacity`` distinct keys are
    held. The first unseen key arriving at capacity closes the table; a
    closed table never admits new keys but keeps counting existing ones.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._counts: dict[str, int] = {}
        self._overflowed = False

    @property
    def overflowed(self) -> bool:
        return self._overflowed

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def add(self, key: str) -> bool:
        """Count one occurrence of ``key``.

        Returns:
        -------
            True if the occurrence was counted, False if it was dropped

        """
        if key in self._counts:
            self._counts[key] += 1
            return True
        if self._overflowed:
            return False
        if len(self._counts) >= self.capacity:
            self._overflowed = True
            return False
        self._counts[key] = 1
        return True

    def most_common(self, limit: int | None = None) -> list[tuple[str, int]]:
        """Return entries by descending count; ties keep insertion order."""
        entries = sorted(self._counts.items(), key=lambda item: -item[1])
        if limit is None:
            return entries
        return entries[: max(limit, 0)]


class ColumnAccumulator:
    """Running counters for one column during a single pass."""

    def __init__(
        self,
        name: str,
        logical_type: str | None = None,
        config: ProfilerConfig = DEFAULT_CONFIG,
    ) -> None:
        self.name = name
        self.logical_type = logical_type
        self.max_value_length = config.max_value_length
        self.null_count = 0
        self.non_null_count = 0
        self.type_counts: dict[TypeCategory, int] = dict.fromkeys(TypeCategory, 0)
        self.numeric_count = 0
        self.numeric_min: int | float | None = None
        self.numeric_max: int | float | None = None
        self.temporal_min: int | float | None = None
        self.temporal_max: int | float | None = None
        self.frequencies = FrequencyTable(config.max_freq_map_size)

    @property
    def processed(self) -> int:
        return self.null_count + self.non_null_count

    @property
    def overflowed(self) -> bool:
        return self.frequencies.overflowed

    def update(self, value: Any) -> None:
        """Consume one raw value of this column."""
        if is_null(value):
            self.null_count += 1
            return

        self.non_null_count += 1
        self.type_counts[classify_value(value)] += 1
        self._update_frequency(value)

        number = finite_number(value)
        if number is None:
            return
        self.numeric_count += 1
        self.numeric_min, self.numeric_max = _extend(
            self.numeric_min, self.numeric_max, number
        )
        if not is_timestamp(self.logical_type):
            return
        millis = to_millis(number, self.logical_type)
        if millis is not None:
            self.temporal_min, self.temporal_max = _extend(
                self.temporal_min, self.temporal_max, millis
            )

    def _update_frequency(self, value: Any) -> None:
        key = frequency_key(value, self.max_value_length)
        if key is None:
            return
        was_overflowed = self.frequencies.overflowed
        self.frequencies.add(key)
        if self.frequencies.overflowed and not was_overflowed:
            logger.debug(
                f"Column {self.name}: frequency table reached "
                f"{self.frequencies.capacity} distinct values, top-K is now limited"
            )


def _extend(
    current_min: int | float | None,
    current_max: int | float | None,
    value: int | float,
) -> tuple[int | float, int | float]:
    if current_min is None or value < current_min:
        current_min = value
    if current_max is None or value > current_max:
        current_max = value
    return current_min, current_max


def init_accumulators(
    columns: list[str],
    logical_types: dict[str, str],
    config: ProfilerConfig = DEFAULT_CONFIG,
) -> dict[str, ColumnAccumulator]:
    """Create a fresh accumulator for every column."""
    return {
        column: ColumnAccumulator(column, logical_types.get(column), config)
        for column in columns
    }


__all__ = [
    "ColumnAccumulator",
    "FrequencyTable",
    "init_accumulators",
]
