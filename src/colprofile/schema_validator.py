"""Schema Descriptor Validation Module

Validates record schema descriptors against a bundled JSON Schema before
logical types are resolved from them.
"""

import json
import logging
from functools import cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema import ValidationError

from colprofile.errors import SchemaValidationError

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schemas" / "schema_descriptor.schema.json"


class SchemaDescriptorValidator:
    """Validates schema descriptors against the JSON Schema."""

    def __init__(self, schema_path: Path | None = None) -> None:
        """Initialize validator with schema.

        Args:
        ----
            schema_path: Path to the descriptor JSON Schema. If None, uses default.

        """
        self.logger = logging.getLogger(self.__class__.__name__)

        if schema_path is None:
            schema_path = DEFAULT_SCHEMA_PATH

        if not schema_path.exists():
            msg = f"Descriptor schema file not found: {schema_path}"
            raise FileNotFoundError(msg)

        with schema_path.open(encoding="utf-8") as f:
            self.schema = json.load(f)

        self.validator = jsonschema.Draft7Validator(self.schema)

        self.logger.debug(f"Schema descriptor validator initialized with: {schema_path}")

    def validate_data(
        self,
        descriptor: Any,
        raise_on_error: bool = True,
        source_name: str = "schema descriptor",
    ) -> bool:
        """Validate a schema descriptor.

        Args:
        ----
            descriptor: Schema descriptor as a dictionary
            raise_on_error: Whether to raise exception on validation errors
            source_name: Name/path for error messages

        Returns:
        -------
            True if valid, False if invalid (when raise_on_error=False)

        Raises:
        ------
            SchemaValidationError: If validation fails and raise_on_error=True

        """
        try:
            self.validator.validate(descriptor)
            self.logger.debug(f"Schema validation passed for {source_name}")
            return True

        except ValidationError as e:
            error_msg = f"Schema validation failed for {source_name}: {e.message}"
            if e.absolute_path:
                error_msg += f" at path: {'.'.join(str(p) for p in e.absolute_path)}"

            if raise_on_error:
                raise SchemaValidationError(error_msg, [error_msg]) from e
            self.logger.warning(error_msg)
            return False

    def validate_file(self, descriptor_path: Path, raise_on_error: bool = True) -> bool:
        """Validate a schema descriptor file (JSON or YAML).

        Args:
        ----
            descriptor_path: Path to the descriptor file
            raise_on_error: Whether to raise exception on validation errors

        Returns:
        -------
            True if valid, False if invalid (when raise_on_error=False)

        Raises:
        ------
            SchemaValidationError: If validation fails and raise_on_error=True
            FileNotFoundError: If file doesn't exist

        """
        try:
            descriptor = load_schema_descriptor(descriptor_path)
        except yaml.YAMLError as e:
            error_msg = f"Invalid descriptor file {descriptor_path}: {e}"
            if raise_on_error:
                raise SchemaValidationError(error_msg) from e
            self.logger.exception(error_msg)
            return False

        return self.validate_data(descriptor, raise_on_error, str(descriptor_path))

    def get_validation_errors(self, descriptor: Any) -> list[str]:
        """Get list of validation errors without raising exceptions.

        Args:
        ----
            descriptor: Schema descriptor as a dictionary

        Returns:
        -------
            List of error messages (empty if valid)

        """
        errors = []
        for error in self.validator.iter_errors(descriptor):
            error_msg = f"Schema error: {error.message}"
            if error.absolute_path:
                error_msg += (
                    f" at path: {'.'.join(str(p) for p in error.absolute_path)}"
                )
            errors.append(error_msg)
        return errors


def load_schema_descriptor(descriptor_path: str | Path) -> Any:
    """Load a schema descriptor from a JSON or YAML file.

    JSON is a subset of YAML, so both are read with the YAML loader.

    Raises:
    ------
        FileNotFoundError: If file doesn't exist

    """
    descriptor_file = Path(descriptor_path)
    if not descriptor_file.exists():
        msg = f"Schema descriptor not found: {descriptor_file}"
        raise FileNotFoundError(msg)

    with descriptor_file.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def validate_schema_descriptor(descriptor: Any) -> None:
    """Validate a schema descriptor with the bundled JSON Schema.

    Raises:
    ------
        SchemaValidationError: If the descriptor is malformed

    """
    _default_validator().validate_data(descriptor)


@cache
def _default_validator() -> SchemaDescriptorValidator:
    return SchemaDescriptorValidator()
