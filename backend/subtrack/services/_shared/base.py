# subtrack/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import AuthorizationError
from subtrack.services._shared.policies.common import can_access
from subtrack.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


def utcnow() -> datetime:
    """Return the current timezone-aware UTC instant."""
    return datetime.now(UTC)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Own the clock so time-dependent rules are testable.
    * Route every ownership check through :func:`can_access`.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services raise :mod:`subtrack.services._shared.errors` types only; the
      HTTP layer maps them to status codes.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        """
        Initialize the base service.

        :param clock: Callable returning "now" as an aware UTC datetime.
        :type clock: Callable[[], datetime] | None
        """
        self._clock = clock or utcnow

    def now_utc(self) -> datetime:
        return self._clock()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # --------------------------- AuthZ --------------------------------

    def ensure_access(self, requester: Principal, owner_id: int, *, msg: str | None = None) -> None:
        """
        Ensure ``requester`` owns the resource or is an admin.

        :param requester: Authenticated principal.
        :type requester: Principal
        :param owner_id: Owner of the resource (a user id).
        :type owner_id: int
        :param msg: Optional custom error message.
        :type msg: str | None
        :raises AuthorizationError: If neither owner nor admin.
        """
        if not can_access(requester, owner_id):
            raise AuthorizationError(msg or "You are not authorized to access this resource")
