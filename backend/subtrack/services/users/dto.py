# subtrack/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from subtrack.models.user import User


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public projection of a user. The password hash never leaves the service.

    :param id: User identifier.
    :param name: Display name.
    :param email: Normalized email.
    :param created_at: Creation timestamp (UTC).
    :param updated_at: Last update timestamp (UTC).
    """

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
