"""Test profile synthesis from accumulators."""

from __future__ import annotations

import pytest

from colprofile.accumulator import ColumnAccumulator
from colprofile.config import ProfilerConfig
from colprofile.errors import ProfilingError
from colprofile.synthesizer import (
    REASON_MIXED,
    REASON_NOT_NUMERIC,
    build_column_profile,
    compute_top_k,
    compute_type_hint,
    format_timestamp,
)


def _accumulate(values, logical_type=None, config=None):
    acc = ColumnAccumulator("col", logical_type, config or ProfilerConfig())
    for value in values:
        acc.update(value)
    return acc


class TestTypeHint:
    """Test type hint derivation."""

    def test_unknown_without_values(self):
        """Test a column with no non-null values is unknown."""
        assert compute_type_hint(_accumulate([None, None])) == "unknown"

    def test_unknown_wins_over_timestamp(self):
        """Test an all-null timestamp column is unknown."""
        assert compute_type_hint(_accumulate([None], "timestamp-millis")) == "unknown"

    def test_datetime_for_timestamp_columns(self):
        """Test timestamp columns are datetime regardless of values."""
        assert compute_type_hint(_accumulate(["x", 1], "timestamp-micros")) == "datetime"

    def test_dominant_category(self):
        """Test a category with at least 80% share wins."""
        values = ["a", "b", "c", "d", 1]
        assert compute_type_hint(_accumulate(values)) == "string"

    def test_mixed_below_threshold(self):
        """Test no category reaching 80% yields mixed."""
        values = ["a", "b", "c", 1, 2]
        assert compute_type_hint(_accumulate(values)) == "mixed"

    def test_array_and_object(self):
        """Test structural categories can be hinted."""
        assert compute_type_hint(_accumulate([[1], [2]])) == "array"
        assert compute_type_hint(_accumulate([{"a": 1}])) == "object"


class TestTopK:
    """Test top-K extraction."""

    def test_descending_count_with_rates(self):
        """Test entries are ordered by count with rates over non-null values."""
        acc = _accumulate(["a", "b", "a", None, "c", "a"])
        top = compute_top_k(acc, 2)
        assert [(e.value, e.count) for e in top] == [("a", 3), ("b", 1)]
        assert top[0].rate == pytest.approx(0.6)

    def test_rates_sum_at_most_one(self):
        """Test top-K rates never exceed 1 in total."""
        acc = _accumulate(["a", "b", "c", "a", 1, 2])
        assert sum(e.rate for e in compute_top_k(acc, 3)) <= 1.0


class TestBuildColumnProfile:
    """Test full column profile synthesis."""

    def test_numeric_column(self):
        """Test numeric columns report raw extrema."""
        profile = build_column_profile(_accumulate([1, 2, None]), 3, 10)
        assert profile.null_count == 1
        assert profile.non_null_count == 2
        assert profile.null_rate == pytest.approx(1 / 3)
        assert profile.numeric_ratio == 1.0
        assert profile.min == 1
        assert profile.max == 2
        assert profile.min_max_flat is False
        assert profile.min_max_reason is None
        assert profile.min_display is None

    def test_flat_numeric_column(self):
        """Test constant numeric columns are flagged flat."""
        profile = build_column_profile(_accumulate([7, 7, 7]), 3, 10)
        assert profile.min == profile.max == 7
        assert profile.min_max_flat is True

    def test_mixed_column_reason(self):
        """Test partly numeric columns explain the missing extrema."""
        profile = build_column_profile(_accumulate([1, "a", "b"]), 3, 10)
        assert profile.min is None
        assert profile.max is None
        assert profile.min_max_reason == REASON_MIXED
        assert profile.min_max_flat is False

    def test_non_numeric_column_reason(self):
        """Test non-numeric columns explain the missing extrema."""
        profile = build_column_profile(_accumulate(["OK", "OK"]), 2, 10)
        assert profile.min_max_reason == REASON_NOT_NUMERIC
        assert profile.type_hint == "string"
        assert profile.top1_rate == 1.0

    def test_all_null_column_has_no_reason(self):
        """Test columns without values have neither extrema nor reason."""
        profile = build_column_profile(_accumulate([None]), 1, 10)
        assert profile.min is None
        assert profile.min_max_reason is None
        assert profile.null_rate == 1.0
        assert profile.numeric_ratio == 0
        assert profile.top1_rate == 0

    def test_zero_records(self):
        """Test rates are zero when no records were processed."""
        profile = build_column_profile(_accumulate([]), 0, 10)
        assert profile.null_rate == 0
        assert profile.numeric_ratio == 0
        assert profile.type_hint == "unknown"
        assert profile.top_k == []

    def test_timestamp_micros_column(self):
        """Test microsecond timestamps report millisecond extrema with display."""
        acc = _accumulate([1_000_000, 2_000_000], "timestamp-micros")
        profile = build_column_profile(acc, 2, 10)
        assert profile.type_hint == "datetime"
        assert profile.min == 1000
        assert profile.max == 2000
        assert profile.min_display == "1970-01-01T00:00:01.000Z"
        assert profile.max_display == "1970-01-01T00:00:02.000Z"

    def test_timestamp_column_with_text(self):
        """Test timestamp columns with mostly text report a reason."""
        acc = _accumulate(["2024-01-01", "2024-01-02", 5], "timestamp-millis")
        profile = build_column_profile(acc, 3, 10)
        assert profile.min is None
        assert profile.min_max_reason == REASON_MIXED

    def test_top_k_limited_mirrors_overflow(self):
        """Test the limited flag follows the frequency table overflow."""
        config = ProfilerConfig(max_freq_map_size=2)
        acc = _accumulate(["a", "b", "c"], config=config)
        profile = build_column_profile(acc, 3, 10, config)
        assert profile.top_k_limited is True
        assert len(profile.top_k) == 2

    def test_top_k_bound(self):
        """Test the top-K list respects the requested size."""
        profile = build_column_profile(_accumulate(list("abcdef")), 6, 3)
        assert len(profile.top_k) == 3

    def test_custom_numeric_threshold(self):
        """Test the numeric threshold comes from the config."""
        config = ProfilerConfig(numeric_threshold=0.5)
        profile = build_column_profile(_accumulate([1, 3, "x"]), 3, 10, config)
        assert (profile.min, profile.max) == (1, 3)


class TestFormatTimestamp:
    """Test calendar rendering of epoch milliseconds."""

    def test_epoch(self):
        """Test zero renders as the epoch."""
        assert format_timestamp(0) == "1970-01-01T00:00:00.000Z"

    def test_fractional_and_negative(self):
        """Test sub-second and pre-epoch values."""
        assert format_timestamp(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"
        assert format_timestamp(-1_000) == "1969-12-31T23:59:59.000Z"

    def test_out_of_range(self):
        """Test values beyond the calendar range raise ProfilingError."""
        with pytest.raises(ProfilingError, match="Invalid time value"):
            format_timestamp(1e20)
