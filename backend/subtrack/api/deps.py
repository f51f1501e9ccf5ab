"""Shared API helpers: response shaping, timing and authentication decorators."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import AuthenticationError
from subtrack.services._shared.ports import ReminderScheduler, RevocationRegistry, TokenIssuer
from subtrack.services.auth.guard import AuthorizationGuard, extract_bearer_token

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Port adapters registered by ``core.extensions``
# --------------------------------------------------------------------------- #


def get_token_issuer() -> TokenIssuer:
    return cast(TokenIssuer, current_app.extensions["token_issuer"])


def get_revocation_registry() -> RevocationRegistry:
    return cast(RevocationRegistry, current_app.extensions["revocation_registry"])


def get_reminder_scheduler() -> ReminderScheduler | None:
    return cast(ReminderScheduler | None, current_app.extensions.get("reminder_scheduler"))


def get_upcoming_window() -> timedelta:
    return timedelta(days=int(current_app.config.get("UPCOMING_RENEWAL_DAYS", 7)))


def bearer_token() -> str | None:
    """Return the bearer credential of the current request, if any."""
    return extract_bearer_token(request.headers.get("Authorization"))


# --------------------------------------------------------------------------- #
# Authentication decorators
# --------------------------------------------------------------------------- #


def current_principal() -> Principal:
    """Return the principal attached by :func:`require_auth`.

    :raises AuthenticationError: If the handler is not behind ``require_auth``.
    """
    principal = g.get("principal")
    if principal is None:
        raise AuthenticationError()
    return cast(Principal, principal)


def require_auth(func: F) -> F:
    """Authenticate the bearer token and attach the principal to ``g``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.pop("principal", None)
        guard = AuthorizationGuard(
            token_issuer=get_token_issuer(),
            revocations=get_revocation_registry(),
            admin_email=current_app.config.get("ADMIN_EMAIL"),
        )
        g.principal = guard.authorize(bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_admin(func: F) -> F:
    """Admit only admins. Must be stacked below :func:`require_auth`."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        AuthorizationGuard.ensure_admin(g.get("principal"))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success(data: Any = None, *, message: str | None = None, status: int = 200) -> Response:
    """Wrap ``data`` in the ``{"success": true, ...}`` envelope."""

    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return json_response(body, status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
