# tests/unit/core/test_errors.py
from __future__ import annotations

import pytest
from subtrack.core.errors import translate_service_error
from subtrack.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExpiredTokenError,
    MissingTokenError,
    NotFoundError,
    UnavailableError,
    ValidationFailedError,
    format_field_errors,
)


@pytest.mark.parametrize(
    ("exc", "status", "code", "message"),
    [
        (NotFoundError("Subscription", 3), 404, "not_found", "Subscription not found"),
        (ConflictError("User", "User already exists"), 409, "conflict", "User already exists"),
        (AuthorizationError("Access denied. Admins only."), 403, "forbidden", None),
        (AuthenticationError(), 401, "unauthorized", None),
        (ExpiredTokenError(), 401, "unauthorized", None),
        (MissingTokenError(), 400, "bad_request", "No token provided"),
        (UnavailableError("Revocation registry"), 503, "service_unavailable", None),
    ],
)
def test_translate_service_error(app, exc, status, code, message):
    err = translate_service_error(exc)
    assert err.status_code == status
    assert err.code == code
    assert err.message == (message or str(exc))


def test_validation_errors_keep_field_details(app):
    err = translate_service_error(ValidationFailedError({"price": ["Must be >= 0."]}))
    assert err.status_code == 400
    assert err.code == "validation_error"
    assert err.details == {"errors": {"price": ["Must be >= 0."]}}


def test_format_field_errors_flattens_nested_messages():
    text = format_field_errors({"name": ["Too short."], "meta": {"tags": ["Bad."]}})
    assert text == "Validation failed: name: Too short.; meta.tags: Bad."
