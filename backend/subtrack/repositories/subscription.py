"""Subscription repository with owner and renewal-window queries."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from subtrack.models.subscription import Subscription
from subtrack.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Persistence-only repository for :class:`Subscription`."""

    model = Subscription

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": Subscription.id,
            "name": Subscription.name,
            "price": Subscription.price,
            "renewal_date": Subscription.renewal_date,
            "start_date": Subscription.start_date,
            "created_at": Subscription.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "user_id": Subscription.user_id,
            "status": Subscription.status,
            "category": Subscription.category,
        }

    def _updatable_fields(self) -> set[str]:
        # ``user_id`` is fixed at creation.
        return {
            "name",
            "price",
            "currency",
            "frequency",
            "category",
            "payment_method",
            "status",
            "start_date",
            "renewal_date",
            "cancellation_date",
        }

    def list_by_owner(self, user_id: int) -> list[Subscription]:
        """Return every subscription owned by ``user_id`` ordered by id."""
        return self.list(filters={"user_id": user_id})

    def list_renewing_between(
        self,
        start: datetime,
        end: datetime,
        *,
        user_id: int | None = None,
    ) -> list[Subscription]:
        """Return subscriptions whose renewal date falls in ``[start, end]``.

        :param start: Inclusive lower bound.
        :param end: Inclusive upper bound.
        :param user_id: Restrict to one owner when given.
        :returns: Matching subscriptions, soonest renewal first.
        """
        stmt = select(Subscription).where(Subscription.renewal_date.between(start, end))
        if user_id is not None:
            stmt = stmt.where(Subscription.user_id == user_id)
        stmt = stmt.order_by(Subscription.renewal_date.asc(), Subscription.id.asc())
        return cast(list[Subscription], list(self.session.execute(stmt).scalars().all()))
