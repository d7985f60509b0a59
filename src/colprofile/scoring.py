"""Rule-based suspicious-column scoring.

Each rule that fires adds a weight to the column score and records a reason.
Scores are capped at 100 and only the three heaviest reasons are kept.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from colprofile.config import ScoringConfig
from colprofile.models.profile import SuspiciousRankingEntry, SuspiciousReason

if TYPE_CHECKING:
    from colprofile.models.profile import ColumnProfile

MAX_SCORE = 100
MAX_REASONS = 3


class ReasonCode(str, Enum):
    """Stable codes of the scoring rules."""

    HIGH_NULL_RATE = "HIGH_NULL_RATE"
    TOP1_DOMINANT = "TOP1_DOMINANT"
    MIN_EQ_MAX = "MIN_EQ_MAX"
    TOPK_LIMITED = "TOPK_LIMITED"


@dataclass(frozen=True)
class WeightedReason:
    """A triggered rule with the weight used for ordering."""

    code: ReasonCode
    weight: int
    message: str

    def to_reason(self) -> SuspiciousReason:
        return SuspiciousReason(code=self.code.value, message=self.message)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, rounding halves up."""
    return math.floor(value + 0.5)


def _scaled_weight(rate: float, threshold: float, maximum: int) -> int:
    ratio = (rate - threshold) / (1 - threshold)
    return round_half_up(min(maximum, maximum * ratio))


def evaluate_rules(
    profile: ColumnProfile, config: ScoringConfig
) -> list[WeightedReason]:
    """Return every rule that fires for a column, in rule order."""
    reasons: list[WeightedReason] = []

    if profile.null_rate >= config.null_rate_threshold:
        reasons.append(
            WeightedReason(
                code=ReasonCode.HIGH_NULL_RATE,
                weight=_scaled_weight(
                    profile.null_rate, config.null_rate_threshold, config.null_rate_max
                ),
                message=f"Null rate is high at {profile.null_rate * 100:.1f}%",
            )
        )

    if profile.top1_rate >= config.top1_rate_threshold:
        reasons.append(
            WeightedReason(
                code=ReasonCode.TOP1_DOMINANT,
                weight=_scaled_weight(
                    profile.top1_rate, config.top1_rate_threshold, config.top1_rate_max
                ),
                message=f"Top value accounts for {profile.top1_rate * 100:.1f}%",
            )
        )

    if profile.min_max_flat:
        reasons.append(
            WeightedReason(
                code=ReasonCode.MIN_EQ_MAX,
                weight=config.flat_value_score,
                message="min and max are identical (constant value)",
            )
        )

    if profile.top_k_limited:
        reasons.append(
            WeightedReason(
                code=ReasonCode.TOPK_LIMITED,
                weight=config.freq_overflow_score,
                message="Too many distinct values, top-K accuracy is reduced",
            )
        )

    return reasons


def score_column(
    column: str, profile: ColumnProfile, config: ScoringConfig
) -> SuspiciousRankingEntry:
    """Score one column profile."""
    reasons = evaluate_rules(profile, config)
    score = sum(reason.weight for reason in reasons)
    reasons.sort(key=lambda reason: -reason.weight)
    return SuspiciousRankingEntry(
        column=column,
        score=min(MAX_SCORE, score),
        reasons=[reason.to_reason() for reason in reasons[:MAX_REASONS]],
    )


def build_suspicious_ranking(
    columns: dict[str, ColumnProfile], config: ScoringConfig
) -> list[SuspiciousRankingEntry]:
    """Rank columns by descending score.

    Equal scores keep the order in which columns were discovered.
    """
    ranking = [score_column(column, profile, config) for column, profile in columns.items()]
    ranking.sort(key=lambda entry: -entry.score)
    return ranking


__all__ = [
    "MAX_REASONS",
    "MAX_SCORE",
    "ReasonCode",
    "WeightedReason",
    "build_suspicious_ranking",
    "evaluate_rules",
    "round_half_up",
    "score_column",
]
