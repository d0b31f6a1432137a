"""Tests for the error taxonomy."""

import sqlite3

from pantry.errors import (
    ConfigurationError,
    InvalidJSONError,
    MalformedResponseError,
    RateLimitError,
    StoreError,
    UpstreamError,
    ValidationError,
)


def test_error_body_shape():
    err = ValidationError("Invalid request body. Required: text (string, non-empty)")
    assert err.to_dict() == {
        "error": "Validation Error",
        "message": "Invalid request body. Required: text (string, non-empty)",
        "statusCode": 400,
    }


def test_status_codes():
    assert RateLimitError(retry_after=5).status_code == 429
    assert UpstreamError("x").status_code == 502
    assert MalformedResponseError("x").status_code == 502
    assert ConfigurationError("x").status_code == 500
    assert StoreError("x").status_code == 500


def test_rate_limit_defaults():
    err = RateLimitError(retry_after=42)
    assert err.retry_after == 42
    assert err.message == "Rate limit exceeded. Please try again later."


def test_store_error_appends_cause():
    err = StoreError("Failed to create product", sqlite3.IntegrityError("UNIQUE constraint failed"))
    assert err.message == "Failed to create product: UNIQUE constraint failed"


def test_invalid_json_is_validation_error():
    err = InvalidJSONError("Request body must be valid JSON")
    assert isinstance(err, ValidationError)
    assert err.to_dict()["error"] == "Invalid JSON"
    assert err.status_code == 400
