"""Exceptions raised by the profiling engine."""


class ProfilingError(Exception):
    """A profiling run could not complete."""


class SchemaValidationError(ProfilingError):
    """Schema descriptor does not have the expected structure."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
