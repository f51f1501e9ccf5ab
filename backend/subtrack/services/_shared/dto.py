# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated requester resolved by the authorization guard.

    :param id: User identifier.
    :type id: int
    :param email: Normalized email of the user.
    :type email: str
    :param is_admin: Whether the email matches the configured admin address.
    :type is_admin: bool
    """

    id: int
    email: str
    is_admin: bool = False
