# subtrack/services/users/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from subtrack.services._shared.base import BaseService
from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import ConflictError, NotFoundError, violates
from subtrack.services.users.dto import UserPublicOut

logger = logging.getLogger(__name__)

_FORBIDDEN = "Forbidden: You are not allowed to access this user's data."


class UserService(BaseService):
    """Account management: listing, reading, updating and deleting users."""

    def list_users(self) -> list[UserPublicOut]:
        with self.ro_uow() as uow:
            return [UserPublicOut.from_model(u) for u in uow.users.list(sort=["id"])]

    def get_user(self, user_id: int, requester: Principal) -> UserPublicOut:
        """
        Return one user's public profile.

        Access is checked before existence so callers cannot probe ids they
        are not allowed to see.

        :raises AuthorizationError: Neither the user nor an admin.
        :raises NotFoundError: Unknown id.
        """
        self.ensure_access(requester, user_id, msg=_FORBIDDEN)
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut.from_model(user)

    def update_user(
        self, user_id: int, requester: Principal, patch: Mapping[str, Any]
    ) -> UserPublicOut:
        """
        Apply ``patch`` (``name``, ``email``, ``password``) to a user.

        :raises ConflictError: If the new email belongs to another account.
        """
        self.ensure_access(requester, user_id, msg=_FORBIDDEN)
        try:
            with self.rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                email = patch.get("email")
                if email is not None:
                    other = uow.users.get_by_email(email)
                    if other is not None and other.id != user.id:
                        raise ConflictError("User", "User already exists")
                uow.users.assign_updates(user, patch)
                out = UserPublicOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", "User already exists") from exc
            raise

        logger.info("user.updated", extra={"user_id": user_id, "fields": sorted(patch)})
        return out

    def delete_user(self, user_id: int, requester: Principal) -> None:
        """Delete a user together with every subscription they own."""
        self.ensure_access(requester, user_id, msg=_FORBIDDEN)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.delete(user)
        logger.info("user.deleted", extra={"user_id": user_id})
