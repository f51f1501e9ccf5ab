# subtrack/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from subtrack.services.users.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """
    Input DTO for registration.

    :param name: Display name.
    :type name: str
    :param email: User email (normalized by the model).
    :type email: str
    :param password: Raw password (hashed before storage).
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SignInIn:
    """
    Input DTO for sign-in.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Session token plus the public user it was issued for.

    :param token: Encoded session JWT.
    :type token: str
    :param user: Public user projection.
    :type user: UserPublicOut
    """

    token: str
    user: UserPublicOut
