# tests/integration/test_auth_api.py
from __future__ import annotations

from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy import func, select
from subtrack.models.user import User

from tests.factories.user import UserFactory
from tests.helpers.utils import API, error_body

SIGN_UP = f"{API}/auth/sign-up"
SIGN_IN = f"{API}/auth/sign-in"
SIGN_OUT = f"{API}/auth/sign-out"


def _payload(**overrides):
    data = {"name": "Ada Lovelace", "email": "ada@example.com", "password": "engine1"}
    data.update(overrides)
    return data


def test_sign_up_returns_token_and_public_user(client):
    resp = client.post(SIGN_UP, json=_payload())

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["email"] == "ada@example.com"
    assert {"id", "name", "createdAt", "updatedAt"} <= set(user)
    assert "password" not in user and "password_hash" not in user


def test_duplicate_sign_up_conflicts_and_keeps_one_row(client, session):
    first = client.post(SIGN_UP, json=_payload())
    second = client.post(SIGN_UP, json=_payload(email="ADA@example.com"))

    assert first.status_code == 201
    assert second.status_code == 409
    assert error_body(second)["error"] == "User already exists"
    count = session.execute(
        select(func.count(User.id)).where(User.email == "ada@example.com")
    ).scalar_one()
    assert count == 1


def test_sign_up_validation_lists_every_field(client):
    resp = client.post(SIGN_UP, json={"name": "A", "email": "nope", "password": "123"})

    assert resp.status_code == 400
    body = error_body(resp)
    assert body["code"] == "validation_error"
    assert set(body["errors"]) == {"name", "email", "password"}
    for field in ("name", "email", "password"):
        assert f"{field}:" in body["error"]


def test_sign_in_success(client):
    user = UserFactory(password="hunter22")

    resp = client.post(SIGN_IN, json={"email": user.email, "password": "hunter22"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "User signed in successfully"
    assert body["data"]["user"]["id"] == user.id


def test_sign_in_wrong_password_is_401(client):
    user = UserFactory(password="hunter22")
    resp = client.post(SIGN_IN, json={"email": user.email, "password": "wrong"})
    assert resp.status_code == 401
    assert error_body(resp)["error"] == "Invalid password"


def test_sign_in_unknown_email_is_404(client):
    resp = client.post(SIGN_IN, json={"email": "ghost@example.com", "password": "x"})
    assert resp.status_code == 404
    assert error_body(resp)["error"] == "User not found"


def test_sign_in_unified_errors(app, client):
    app.config["AUTH_UNIFY_SIGNIN_ERRORS"] = True
    try:
        resp = client.post(SIGN_IN, json={"email": "ghost@example.com", "password": "x"})
    finally:
        app.config["AUTH_UNIFY_SIGNIN_ERRORS"] = False
    assert resp.status_code == 401
    assert error_body(resp)["error"] == "Invalid credentials"


def test_sign_out_then_token_is_rejected(client, sign_in):
    user = UserFactory()
    token = sign_in(user.email)
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get(f"{API}/users/{user.id}", headers=headers).status_code == 200

    resp = client.post(SIGN_OUT, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "User signed out successfully"}

    after = client.get(f"{API}/users/{user.id}", headers=headers)
    assert after.status_code == 401
    assert error_body(after)["code"] == "unauthorized"


def test_sign_out_twice_is_idempotent(client, auth_header, revocations):
    headers = auth_header(UserFactory())
    assert client.post(SIGN_OUT, headers=headers).status_code == 200
    assert client.post(SIGN_OUT, headers=headers).status_code == 200
    assert len(revocations) == 1


def test_sign_out_without_token_is_400(client):
    resp = client.post(SIGN_OUT)
    assert resp.status_code == 400
    assert error_body(resp)["error"] == "No token provided"


def test_sign_out_accepts_expired_token(client, revocations):
    token = create_access_token(identity="1", expires_delta=timedelta(seconds=-30))
    resp = client.post(SIGN_OUT, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert revocations.is_revoked(token)


def test_sign_out_with_forged_token_is_401(client, revocations):
    resp = client.post(SIGN_OUT, headers={"Authorization": "Bearer forged.token.value"})
    assert resp.status_code == 401
    assert len(revocations) == 0


@pytest.mark.parametrize(
    "header",
    ["", "Bearer", "Token abc", "Bearer garbage"],
)
def test_protected_route_rejects_bad_credentials(client, header):
    user = UserFactory()
    resp = client.get(f"{API}/users/{user.id}", headers={"Authorization": header})
    assert resp.status_code == 401
    assert error_body(resp)["error"] == "Session expired or unauthorized. Please sign in again."


def test_unreachable_registry_is_503(app, client, auth_header):
    from subtrack.services._shared.errors import UnavailableError

    class _Down:
        def revoke(self, token):
            raise UnavailableError("Revocation registry")

        def is_revoked(self, token):
            raise UnavailableError("Revocation registry")

    headers = auth_header(UserFactory())
    app.extensions["revocation_registry"] = _Down()
    resp = client.get(f"{API}/subscriptions/upcoming-renewals", headers=headers)

    assert resp.status_code == 503
    assert error_body(resp)["code"] == "service_unavailable"
