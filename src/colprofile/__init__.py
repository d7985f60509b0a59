"""Single-pass column profiling for schema-less records."""

from colprofile.accumulator import ColumnAccumulator, FrequencyTable
from colprofile.config import (
    DEFAULT_CONFIG,
    ProfilerConfig,
    ScoringConfig,
    load_config_from_yaml,
    save_config_to_yaml,
)
from colprofile.engine import compute_profile, resolve_top_k
from colprofile.errors import ProfilingError, SchemaValidationError
from colprofile.logical_types import detect_logical_types, extract_logical_type
from colprofile.models import (
    ColumnProfile,
    ErrorMessage,
    Profile,
    ProfileRequest,
    ProgressMessage,
    ResultMessage,
    StartMessage,
    SuspiciousRankingEntry,
    SuspiciousReason,
    TopKEntry,
)
from colprofile.normalize import TypeCategory, classify_value, normalize_value
from colprofile.schema_validator import SchemaDescriptorValidator
from colprofile.scoring import ReasonCode, build_suspicious_ranking
from colprofile.worker import ProfileRun, ProfileWorker, handle_message, run_profile_job

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "ColumnAccumulator",
    "ColumnProfile",
    "ErrorMessage",
    "FrequencyTable",
    "Profile",
    "ProfileRequest",
    "ProfileRun",
    "ProfileWorker",
    "ProfilerConfig",
    "ProfilingError",
    "ProgressMessage",
    "ReasonCode",
    "ResultMessage",
    "SchemaDescriptorValidator",
    "SchemaValidationError",
    "ScoringConfig",
    "StartMessage",
    "SuspiciousRankingEntry",
    "SuspiciousReason",
    "TopKEntry",
    "TypeCategory",
    "build_suspicious_ranking",
    "classify_value",
    "compute_profile",
    "detect_logical_types",
    "extract_logical_type",
    "handle_message",
    "load_config_from_yaml",
    "normalize_value",
    "resolve_top_k",
    "run_profile_job",
    "save_config_to_yaml",
]
