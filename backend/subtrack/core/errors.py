"""Centralized JSON error handling for the API.

Every failure leaves the service as ``{"success": false, "error": <message>}``
plus a stable ``code`` and the correlation ``request_id``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from subtrack.core.logger import ensure_request_id
from subtrack.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    UnavailableError,
    format_field_errors,
)

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _envelope(
    *,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the failure envelope.

    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Envelope dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {"success": False, "error": message, "message": message, "code": code}
    if details:
        body.update(details)
    body["request_id"] = ensure_request_id()
    return body


def _error_response(body: dict[str, Any], status: int) -> tuple[Response, int]:
    return jsonify(body), status


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier, typically snake_case. Defaults to
        ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload (e.g., validation messages) merged into
        the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_body(self) -> dict[str, Any]:
        """
        Serialize error metadata into the failure envelope.

        :returns: Envelope dictionary.
        :rtype: dict
        """
        return _envelope(code=self.code, message=self.message, details=self.details or None)


# Domain conveniences
class BadRequest(APIError):
    """400 for schema and invariant violations."""

    def __init__(self, message: str = "Bad request", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, details=details)


class NotFound(APIError):
    """404 when resources are missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    """409 for uniqueness/constraint collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code="unauthorized")


class Forbidden(APIError):
    """403 when authorization denies access."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


class Unavailable(APIError):
    """503 when a downstream dependency cannot be reached."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            message, status_code=HTTPStatus.SERVICE_UNAVAILABLE, code="service_unavailable"
        )


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Map a service-level error to its HTTP counterpart.

    :param exc: Exception raised within the service layer.
    :type exc: ServiceError
    :returns: API error carrying status code and message.
    :rtype: APIError
    """
    message = str(exc)
    if isinstance(exc, NotFoundError):
        return NotFound(message)
    if isinstance(exc, ConflictError):
        return Conflict(message)
    if isinstance(exc, AuthorizationError):
        return Forbidden(message)
    if isinstance(exc, (AuthenticationError, InvalidTokenError)):
        return Unauthorized(message)
    if isinstance(exc, UnavailableError):
        return Unavailable(message)
    errors = getattr(exc, "errors", None)
    if errors:
        return APIError(
            message,
            status_code=HTTPStatus.BAD_REQUEST,
            code="validation_error",
            details={"errors": errors},
        )
    return BadRequest(message)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error uses the ``{"success": false, "error": ...}`` envelope.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        body = err.to_body()
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
            extra={"path": request.path},
        )
        return _error_response(body, err.status_code)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: code=%s status=%s detail=%s", error_code, status, message)
        return _error_response(_envelope(code=error_code, message=message), status)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        messages = err.normalized_messages()
        body = _envelope(
            code="validation_error",
            message=format_field_errors(messages),
            details={"errors": messages},
        )
        log.warning("ValidationError: fields=%s", sorted(messages))
        return _error_response(body, HTTPStatus.BAD_REQUEST)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError", exc_info=True)
        body = _envelope(code="conflict", message="Duplicate field value entered")
        return _error_response(body, HTTPStatus.CONFLICT)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError", exc_info=True)
        body = _envelope(code="service_unavailable", message="Service temporarily unavailable")
        return _error_response(body, HTTPStatus.SERVICE_UNAVAILABLE)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception", exc_info=True)
        body = _envelope(code="internal_server_error", message="Server Error")
        return _error_response(body, HTTPStatus.INTERNAL_SERVER_ERROR)
