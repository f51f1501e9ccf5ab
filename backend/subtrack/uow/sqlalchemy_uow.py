"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session, scoped_session

from subtrack.core.extensions import db
from subtrack.repositories import SubscriptionRepository, UserRepository
from subtrack.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.subscriptions = SubscriptionRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Commits when the block exits cleanly and rolls back when it raises, so a
    failure after a partial write never leaves orphaned rows behind.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session starts its transaction lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    - ORM flushes carrying pending changes are blocked while the scope is open.
    - When the scope started the transaction it also ends it with a rollback;
      when it joined an outer transaction (tests, nested service calls) it
      leaves that transaction alone.
    - ``commit()`` is not allowed.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._owns_transaction = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owns_transaction = not self._target().in_transaction()
        event.listen(self._target(), "before_flush", self._block_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_transaction:
                self.session.rollback()
        finally:
            event.remove(self._target(), "before_flush", self._block_flush)
            self._owns_transaction = False

    def _target(self) -> Session:
        # Listen on the thread-local session, never on the shared factory.
        if isinstance(self.session, scoped_session):
            return self.session()
        return self.session

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
