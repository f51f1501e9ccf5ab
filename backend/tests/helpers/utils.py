"""Tiny helpers shared across test modules."""

from __future__ import annotations

from subtrack.services._shared.dto import Principal

API = "/api/v1"


def principal_of(user, *, is_admin: bool = False) -> Principal:
    """Build the principal the guard would attach for ``user``."""
    return Principal(id=user.id, email=user.email, is_admin=is_admin)


def error_body(resp) -> dict:
    """Return the JSON failure envelope of ``resp`` after checking its shape."""
    body = resp.get_json()
    assert body["success"] is False
    assert "error" in body and "code" in body
    return body
