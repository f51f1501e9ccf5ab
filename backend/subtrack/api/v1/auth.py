"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from subtrack.api.deps import (
    bearer_token,
    get_revocation_registry,
    get_token_issuer,
    success,
    timing,
)
from subtrack.core.extensions import limiter
from subtrack.schemas import SignInSchema, SignUpSchema, UserSchema
from subtrack.services.auth.dto import AuthOut, SignInIn, SignUpIn
from subtrack.services.auth.service import AuthService

bp = Blueprint("auth", __name__, url_prefix="/auth")

sign_up_schema = SignUpSchema()
sign_in_schema = SignInSchema()
user_schema = UserSchema()


def _signin_rate_limit() -> str:
    return str(current_app.config.get("AUTH_SIGNIN_RATE_LIMIT", "5 per minute"))


def _service() -> AuthService:
    return AuthService(
        token_issuer=get_token_issuer(),
        revocations=get_revocation_registry(),
        unify_signin_errors=bool(current_app.config.get("AUTH_UNIFY_SIGNIN_ERRORS", False)),
    )


def _auth_body(out: AuthOut) -> dict:
    return {"token": out.token, "user": user_schema.dump(out.user)}


@bp.post("/sign-up")
@limiter.limit(_signin_rate_limit)
@timing
def sign_up():
    """Register a new user and return a session token."""

    data = sign_up_schema.load(request.get_json(silent=True) or {})
    out = _service().sign_up(SignUpIn(**data))
    return success(_auth_body(out), message="User created successfully", status=201)


@bp.post("/sign-in")
@limiter.limit(_signin_rate_limit)
@timing
def sign_in():
    """Authenticate credentials and issue a session token."""

    data = sign_in_schema.load(request.get_json(silent=True) or {})
    out = _service().sign_in(SignInIn(**data))
    return success(_auth_body(out), message="User signed in successfully")


@bp.post("/sign-out")
@timing
def sign_out():
    """Revoke the presented bearer token. Expired tokens are accepted."""

    _service().sign_out(bearer_token())
    return success(message="User signed out successfully")
