"""Worker message models.

A run is requested with a START message and answers with any number of
PROGRESS messages followed by exactly one RESULT or ERROR message.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from colprofile.models.profile import Profile


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ProfileRequest(_WireModel):
    """Input of one profiling run."""

    records: list[Any] = Field(
        default_factory=list, description="Record mappings to profile"
    )
    schema_: dict[str, Any] | None = Field(
        default=None, alias="schema", description="Optional schema descriptor"
    )
    top_k: Any = Field(
        default=None, description="Requested top-K size; resolved by the engine"
    )

    @field_validator("records", mode="before")
    @classmethod
    def records_default_to_empty(cls, v) -> Any:
        """Treat a missing record list as empty."""
        return [] if v is None else v


class ProgressPayload(_WireModel):
    """Progress of a running profile computation."""

    processed_records: int = Field(ge=0)
    total_records: int = Field(ge=0)


class ErrorPayload(_WireModel):
    """Why a run could not complete."""

    message: str


class StartMessage(_WireModel):
    """Request to start a run."""

    type: Literal["START"] = "START"
    payload: ProfileRequest = Field(default_factory=ProfileRequest)


class ProgressMessage(_WireModel):
    """Periodic progress notification."""

    type: Literal["PROGRESS"] = "PROGRESS"
    payload: ProgressPayload


class ResultMessage(_WireModel):
    """Successful completion of a run."""

    type: Literal["RESULT"] = "RESULT"
    payload: Profile


class ErrorMessage(_WireModel):
    """Failed run."""

    type: Literal["ERROR"] = "ERROR"
    payload: ErrorPayload


ProfileMessage = Annotated[
    ProgressMessage | ResultMessage | ErrorMessage,
    Field(discriminator="type"),
]

TERMINAL_MESSAGE_TYPES = frozenset({"RESULT", "ERROR"})


def is_terminal(message: ProgressMessage | ResultMessage | ErrorMessage) -> bool:
    """Return True for the last message of a run."""
    return message.type in TERMINAL_MESSAGE_TYPES


__all__ = [
    "TERMINAL_MESSAGE_TYPES",
    "ErrorMessage",
    "ErrorPayload",
    "ProfileMessage",
    "ProfileRequest",
    "ProgressMessage",
    "ProgressPayload",
    "ResultMessage",
    "StartMessage",
    "is_terminal",
]
