"""Pytest configuration for colprofile tests."""

import pytest


@pytest.fixture
def timestamp_schema():
    """Schema descriptor with millisecond and microsecond timestamp fields."""
    return {
        "type": "record",
        "name": "Event",
        "fields": [
            {"name": "id", "type": "long"},
            {
                "name": "created_ms",
                "type": {"type": "long", "logicalType": "timestamp-millis"},
            },
            {
                "name": "updated_us",
                "type": ["null", {"type": "long", "logicalType": "timestamp-micros"}],
            },
            {"name": "label", "type": ["null", "string"]},
        ],
    }


@pytest.fixture
def mixed_records():
    """Records covering nulls, missing keys and several value types."""
    return [
        {"id": 1, "status": "OK", "payload": {"a": 1}, "tags": ["x"]},
        {"id": 2, "status": "OK", "payload": None, "tags": ["x", "y"]},
        {"id": 3, "status": "FAIL", "tags": []},
        {"id": 4, "status": "OK", "payload": {"a": 2}},
        {"id": 5, "status": None, "extra": True},
    ]
