"""Engine configuration.

Holds the fixed capacity constants and scoring weights used by a profiling run.
A single immutable value is passed explicitly through the engine, the
accumulators and the scorer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ScoringConfig(BaseModel):
    """Weights and thresholds for the suspicious-column rules."""

    null_rate_threshold: float = Field(
        default=0.3, ge=0.0, lt=1.0, description="Null rate at which scoring starts"
    )
    null_rate_max: int = Field(
        default=40, ge=0, le=100, description="Maximum contribution of the null rule"
    )
    top1_rate_threshold: float = Field(
        default=0.95,
        ge=0.0,
        lt=1.0,
        description="Top-1 value share at which scoring starts",
    )
    top1_rate_max: int = Field(
        default=30, ge=0, le=100, description="Maximum contribution of the top-1 rule"
    )
    flat_value_score: int = Field(
        default=10, ge=0, le=100, description="Flat score for min == max columns"
    )
    freq_overflow_score: int = Field(
        default=8,
        ge=0,
        le=100,
        description="Flat score for columns whose frequency table overflowed",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class ProfilerConfig(BaseModel):
    """Capacity constants for one profiling run."""

    max_freq_map_size: int = Field(
        default=50000,
        ge=1,
        description="Maximum number of distinct keys kept per column",
    )
    numeric_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Share of numeric values required to report min/max",
    )
    type_hint_threshold: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Share of the dominant type category required for a type hint",
    )
    max_value_length: int = Field(
        default=200, ge=1, description="Frequency keys are truncated past this length"
    )
    progress_interval: int = Field(
        default=1000, ge=1, description="Records between progress notifications"
    )
    default_top_k: int = Field(
        default=10, ge=1, description="Top-K size used when none is requested"
    )
    validate_schema: bool = Field(
        default=True,
        description="Validate schema descriptors before resolving logical types",
    )
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    model_config = ConfigDict(frozen=True, extra="forbid")


DEFAULT_CONFIG = ProfilerConfig()


def load_config_from_yaml(yaml_path: str | Path) -> ProfilerConfig:
    """Load a profiler configuration from a YAML file.

    Keys present in the file override the defaults; absent keys keep them.

    Args:
        yaml_path: Path to the YAML configuration file

    Returns:
        Validated ProfilerConfig

    Raises:
        ValidationError: If a configuration value is invalid
        FileNotFoundError: If file doesn't exist

    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        msg = f"Config file not found: {yaml_file}"
        raise FileNotFoundError(msg)

    with yaml_file.open(encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {yaml_file}"
        raise ValueError(msg)

    config = ProfilerConfig(**data)
    logger.info(f"Loaded profiler config from {yaml_file}")
    return config


def save_config_to_yaml(config: ProfilerConfig, yaml_path: str | Path) -> None:
    """Save a profiler configuration to a YAML file.

    Args:
        config: Configuration to save
        yaml_path: Output YAML file path

    """
    import yaml

    yaml_file = Path(yaml_path)
    yaml_file.parent.mkdir(parents=True, exist_ok=True)

    with yaml_file.open("w", encoding="utf-8") as f:
        yaml.dump(
            config.model_dump(),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )


__all__ = [
    "DEFAULT_CONFIG",
    "ProfilerConfig",
    "ScoringConfig",
    "load_config_from_yaml",
    "save_config_to_yaml",
]
