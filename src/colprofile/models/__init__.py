"""Result and message models for colprofile."""

from colprofile.models.messages import (
    TERMINAL_MESSAGE_TYPES,
    ErrorMessage,
    ErrorPayload,
    ProfileMessage,
    ProfileRequest,
    ProgressMessage,
    ProgressPayload,
    ResultMessage,
    StartMessage,
    is_terminal,
)
from colprofile.models.profile import (
    ColumnProfile,
    Profile,
    SuspiciousRankingEntry,
    SuspiciousReason,
    TopKEntry,
)

__all__ = [
    "TERMINAL_MESSAGE_TYPES",
    "ColumnProfile",
    "ErrorMessage",
    "ErrorPayload",
    "Profile",
    "ProfileMessage",
    "ProfileRequest",
    "ProgressMessage",
    "ProgressPayload",
    "ResultMessage",
    "StartMessage",
    "SuspiciousRankingEntry",
    "SuspiciousReason",
    "TopKEntry",
    "is_terminal",
]
