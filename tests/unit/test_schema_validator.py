"""Test schema descriptor validation."""

from __future__ import annotations

import json

import pytest

from colprofile.errors import ProfilingError, SchemaValidationError
from colprofile.schema_validator import (
    SchemaDescriptorValidator,
    load_schema_descriptor,
    validate_schema_descriptor,
)


@pytest.fixture
def validator():
    """Validator using the bundled JSON Schema."""
    return SchemaDescriptorValidator()


class TestSchemaDescriptorValidator:
    """Test descriptor validation."""

    def test_valid_descriptor(self, validator, timestamp_schema):
        """Test a record schema with logical types is valid."""
        assert validator.validate_data(timestamp_schema) is True

    def test_nested_record(self, validator):
        """Test nested record and array types are valid."""
        descriptor = {
            "fields": [
                {
                    "name": "address",
                    "type": {
                        "type": "record",
                        "name": "Address",
                        "fields": [{"name": "zip", "type": "string"}],
                    },
                },
                {"name": "tags", "type": {"type": "array", "items": "string"}},
            ]
        }
        assert validator.validate_data(descriptor) is True

    @pytest.mark.parametrize(
        "field",
        [{"name": "a"}, {"name": "a", "type": 42}, {"type": "string"}, {}],
    )
    def test_untagged_fields_are_lenient(self, validator, field):
        """Test fields without a logical type need neither a name nor a type."""
        assert validator.validate_data({"fields": [field]}) is True

    def test_tagged_field_needs_name(self, validator):
        """Test a field carrying a logical type must be named."""
        tagged = ["null", {"logicalType": "timestamp-millis"}]
        descriptor = {"fields": [{"type": tagged}]}
        with pytest.raises(SchemaValidationError, match="fields.0"):
            validator.validate_data(descriptor)

    def test_non_object_field(self, validator):
        """Test every field must be an object."""
        with pytest.raises(SchemaValidationError, match="fields.0"):
            validator.validate_data({"fields": ["a"]})

    def test_non_string_logical_type(self, validator):
        """Test logical types must be strings."""
        descriptor = {"fields": [{"name": "a", "type": {"logicalType": 5}}]}
        assert validator.validate_data(descriptor, raise_on_error=False) is False

    def test_non_object_descriptor(self, validator):
        """Test the descriptor itself must be an object."""
        with pytest.raises(SchemaValidationError) as exc_info:
            validator.validate_data(["fields"])
        assert exc_info.value.errors

    def test_get_validation_errors(self, validator):
        """Test errors are collected without raising."""
        errors = validator.get_validation_errors(
            {"fields": [{"type": {"logicalType": "timestamp-micros"}}]}
        )
        assert len(errors) == 1
        assert "name" in errors[0]
        assert validator.get_validation_errors({"fields": []}) == []

    def test_missing_schema_file(self, tmp_path):
        """Test a missing JSON Schema file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            SchemaDescriptorValidator(tmp_path / "missing.json")

    def test_validate_json_file(self, validator, tmp_path, timestamp_schema):
        """Test .avsc style JSON files are loaded and validated."""
        path = tmp_path / "event.avsc"
        path.write_text(json.dumps(timestamp_schema), encoding="utf-8")
        assert validator.validate_file(path) is True

    def test_validate_invalid_yaml_file(self, validator, tmp_path):
        """Test unparseable files are reported."""
        path = tmp_path / "broken.yaml"
        path.write_text("fields: [\n", encoding="utf-8")
        assert validator.validate_file(path, raise_on_error=False) is False
        with pytest.raises(SchemaValidationError, match="Invalid descriptor file"):
            validator.validate_file(path)


class TestModuleHelpers:
    """Test module-level helpers."""

    def test_validate_schema_descriptor_is_profiling_error(self):
        """Test validation failures are profiling errors."""
        with pytest.raises(ProfilingError):
            validate_schema_descriptor({"fields": ["nope"]})

    def test_load_missing_descriptor(self, tmp_path):
        """Test loading a missing descriptor raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_schema_descriptor(tmp_path / "none.avsc")
