"""Transaction boundary contract shared by the service layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subtrack.repositories import SubscriptionRepository, UserRepository


class UnitOfWork(ABC):
    """
    One use-case, one transaction.

    ``users`` and ``subscriptions`` are bound to the same session, so a
    sign-up or a cascade delete is either fully visible or not at all.
    Leaving the block without an exception commits; raising rolls back.
    """

    users: UserRepository
    subscriptions: SubscriptionRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
