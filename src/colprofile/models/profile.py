"""Profile Pydantic Models

Read-only result types produced by one profiling run.
Field aliases follow the camelCase wire names of the result payload.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResultModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TopKEntry(_ResultModel):
    """One frequent value of a column."""

    value: str = Field(description="Canonical (possibly truncated) value text")
    count: int = Field(ge=1, description="Occurrences of the value")
    rate: float = Field(ge=0.0, le=1.0, description="count / non-null count")


class ColumnProfile(_ResultModel):
    """Synthesized statistics for a single column."""

    type_hint: str = Field(
        description="Dominant type category, 'datetime', 'mixed' or 'unknown'"
    )
    null_count: int = Field(ge=0, description="Null or absent values")
    null_rate: float = Field(ge=0.0, le=1.0, description="null count / total records")
    non_null_count: int = Field(ge=0, description="Present, non-null values")
    numeric_ratio: float = Field(
        ge=0.0, le=1.0, description="Finite numeric values / non-null count"
    )
    top_k: list[TopKEntry] = Field(
        default_factory=list, description="Most frequent values, descending count"
    )
    top_k_limited: bool = Field(
        default=False, description="Frequency table overflowed its capacity"
    )
    top1_rate: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Rate of the first top-K entry"
    )
    min: int | float | None = Field(default=None, description="Minimum value")
    max: int | float | None = Field(default=None, description="Maximum value")
    min_display: str | None = Field(
        default=None, description="Calendar rendering of min for timestamp columns"
    )
    max_display: str | None = Field(
        default=None, description="Calendar rendering of max for timestamp columns"
    )
    min_max_reason: str | None = Field(
        default=None, description="Why min/max were not computed"
    )
    min_max_flat: bool = Field(
        default=False, description="min and max are present and equal"
    )

    @property
    def has_min_max(self) -> bool:
        """Whether both extrema were computed."""
        return self.min is not None and self.max is not None


class SuspiciousReason(_ResultModel):
    """A triggered scoring rule, without its weight."""

    code: str = Field(description="Stable reason code")
    message: str = Field(description="Human-readable explanation")


class SuspiciousRankingEntry(_ResultModel):
    """Score and top reasons for one column."""

    column: str = Field(description="Column name")
    score: int = Field(ge=0, le=100, description="Capped suspicious score")
    reasons: list[SuspiciousReason] = Field(
        default_factory=list, max_length=3, description="Heaviest reasons first"
    )


class Profile(_ResultModel):
    """Complete result of a profiling run."""

    total_records: int = Field(ge=0, description="Number of records profiled")
    columns: dict[str, ColumnProfile] = Field(
        default_factory=dict, description="Profiles keyed by column name"
    )
    suspicious_ranking: list[SuspiciousRankingEntry] = Field(
        default_factory=list, description="Columns ordered by descending score"
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the alias-keyed, JSON-compatible result payload."""
        return self.model_dump(mode="json", by_alias=True)

    def column_names(self) -> list[str]:
        """Return column names in discovery order."""
        return list(self.columns)


__all__ = [
    "ColumnProfile",
    "Profile",
    "SuspiciousRankingEntry",
    "SuspiciousReason",
    "TopKEntry",
]
