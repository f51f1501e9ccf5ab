"""User repository: the credential store lookups used by auth and the guard."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from subtrack.models.user import User
from subtrack.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues or verifies tokens; it only finds and stores accounts.
    """

    model = User

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": User.id,
            "email": User.email,
            "name": User.name,
            "created_at": User.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"email": User.email}

    def _updatable_fields(self) -> set[str]:
        # ``password`` goes through the hashing setter on the model.
        return {"name", "email", "password"}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def create(self, *, name: str, email: str, password: str) -> User:
        """Stage a new account with a hashed password and flush it.

        :raises sqlalchemy.exc.IntegrityError: If the email is already taken.
        """
        user = User(name=name, email=email)
        user.password = password
        return self.add(user)
