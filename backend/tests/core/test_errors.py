"""Tests for the error envelope."""

from gardenbook.core.errors import (
    AssetUploadFailedError,
    CategoryExistsError,
    DependencyError,
    ErrorCategory,
    InvalidCredentialError,
    MissingCredentialError,
    NotAuthorizedError,
    ResourceNotFoundError,
    ValidationError,
)


def test_validation_error_envelope():
    body = ValidationError("Plant name required", "name").to_response()["error"]

    assert body["code"] == "VALIDATION_ERROR"
    assert body["message"] == "Plant name required"
    assert body["category"] == "validation"
    assert body["details"] == {"field": "name"}
    assert "timestamp" in body


def test_not_found_has_no_details():
    error = ResourceNotFoundError("Fish", 12)

    assert error.http_status == 404
    assert error.message == "Fish '12' not found"
    assert "details" not in error.to_response()["error"]


def test_status_codes():
    assert MissingCredentialError().http_status == 401
    assert InvalidCredentialError().http_status == 401
    assert NotAuthorizedError().http_status == 403
    assert CategoryExistsError("Ferns").http_status == 409
    assert AssetUploadFailedError("mygardenbook/qr").http_status == 502
    assert DependencyError("boom", "catalog insert").http_status == 503


def test_credential_errors_are_distinguishable():
    assert MissingCredentialError().code == "MISSING_CREDENTIAL"
    assert InvalidCredentialError().code == "INVALID_CREDENTIAL"
    assert NotAuthorizedError().category is ErrorCategory.AUTHORIZATION


def test_dependency_error_names_operation():
    error = DependencyError("connection refused", "catalog insert")
    assert error.message == "catalog insert failed: connection refused"
    assert error.operation == "catalog insert"
