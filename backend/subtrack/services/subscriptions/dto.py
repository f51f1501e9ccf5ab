# subtrack/services/subscriptions/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from subtrack.models.subscription import Subscription


@dataclass(frozen=True, slots=True)
class SubscriptionOut:
    """Detached snapshot of a :class:`Subscription` row."""

    id: int
    user_id: int
    name: str
    price: float
    currency: str
    frequency: str | None
    category: str
    payment_method: str
    status: str
    start_date: datetime
    renewal_date: datetime
    cancellation_date: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, sub: Subscription) -> SubscriptionOut:
        return cls(
            id=sub.id,
            user_id=sub.user_id,
            name=sub.name,
            price=float(sub.price),
            currency=sub.currency,
            frequency=sub.frequency,
            category=sub.category,
            payment_method=sub.payment_method,
            status=sub.status,
            start_date=sub.start_date,
            renewal_date=sub.renewal_date,
            cancellation_date=sub.cancellation_date,
            created_at=sub.created_at,
            updated_at=sub.updated_at,
        )


@dataclass(frozen=True, slots=True)
class CreatedSubscriptionOut:
    """
    Result of creating a subscription.

    :param subscription: The persisted subscription.
    :param workflow_run_id: Reminder run id reported by the scheduler, or
        ``None`` when no trigger was sent or it failed.
    """

    subscription: SubscriptionOut
    workflow_run_id: str | None
