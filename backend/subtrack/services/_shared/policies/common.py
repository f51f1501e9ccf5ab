"""Access predicates shared by every service.

Each rule lives here exactly once so the guard and the services cannot
drift apart.
"""

from __future__ import annotations

from typing import Protocol


class _HasEmail(Protocol):
    email: str


class _Requester(Protocol):
    id: int
    is_admin: bool


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return str(actor_id) == str(owner_id)


def is_admin(user: _HasEmail, admin_email: str | None) -> bool:
    """Return True when ``user`` holds the configured admin address.

    An empty or missing ``admin_email`` means nobody is admin.
    """
    if not admin_email:
        return False
    return user.email.strip().lower() == admin_email.strip().lower()


def can_access(requester: _Requester, owner_id) -> bool:
    """Return True if ``requester`` owns the resource or is an admin."""
    return is_owner(actor_id=requester.id, owner_id=owner_id) or bool(requester.is_admin)
