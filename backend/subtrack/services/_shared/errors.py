"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the stable contract between repositories, ports and application
services. ``subtrack/core/errors.py`` translates them into HTTP responses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message. SQLite only names
    the offending columns, so the caller may pass those as a fallback.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Constraint name (``"uq_users_email"``) or column path (``"users.email"``).

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Unknown subclasses surface as ``400 Bad Request``.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key (kept for logs, not shown to clients).
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class AuthenticationError(ServiceError):
    """The caller could not be authenticated (missing, invalid or revoked session)."""

    def __init__(self, message: str = "Session expired or unauthorized. Please sign in again.") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """The caller is authenticated but not allowed to perform the operation."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class MissingTokenError(ServiceError):
    """No bearer token was presented where one is required."""

    def __init__(self, message: str = "No token provided") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Base class for token verification failures."""


class MalformedTokenError(InvalidTokenError):
    """The token cannot be parsed or its signature does not match."""

    def __init__(self, message: str = "Malformed token") -> None:
        super().__init__(message)


class ExpiredTokenError(InvalidTokenError):
    """The token was valid but is past its expiry."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class ValidationFailedError(ServiceError):
    """
    Raised when input violates one or more invariants.

    Every violated field is collected so a caller sees all problems at once.

    :param errors: Mapping of field name to the messages for that field.
    :type errors: Mapping[str, list[str]]
    """

    def __init__(self, errors: Mapping[str, list[str]]) -> None:
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__(format_field_errors(self.errors))


@dataclass(slots=True)
class UnavailableError(ServiceError):
    """
    Raised when a downstream store or service cannot be reached in time.

    :param resource: Name of the unreachable dependency.
    :type resource: str
    """

    resource: str

    def __str__(self) -> str:
        return f"{self.resource} is temporarily unavailable"


class ReminderTriggerError(ServiceError):
    """The reminder scheduler rejected or did not answer a trigger request."""


def format_field_errors(errors: Mapping[str, object]) -> str:
    """Join field errors into a single ``"field: message; ..."`` sentence."""
    return "Validation failed: " + "; ".join(_field_messages(errors))


def _field_messages(errors: Mapping[str, object], prefix: str = "") -> list[str]:
    parts: list[str] = []
    for field, messages in errors.items():
        name = f"{prefix}{field}"
        if isinstance(messages, Mapping):
            parts.extend(_field_messages(messages, prefix=f"{name}."))
        elif isinstance(messages, (list, tuple)):
            parts.append(f"{name}: " + " ".join(str(m) for m in messages))
        else:
            parts.append(f"{name}: {messages}")
    return parts
