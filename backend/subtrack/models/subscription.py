"""Subscription model and the vocabularies its enum columns accept."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from subtrack.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UTCDateTime

if TYPE_CHECKING:
    from .user import User

CURRENCIES: Final[tuple[str, ...]] = ("USD", "EUR", "GBP", "INR", "AUD", "CAD", "JPY")
FREQUENCIES: Final[tuple[str, ...]] = ("daily", "weekly", "monthly", "yearly")
CATEGORIES: Final[tuple[str, ...]] = (
    "sports",
    "news",
    "entertainment",
    "lifestyle",
    "technology",
    "finance",
    "politics",
    "other",
)
STATUSES: Final[tuple[str, ...]] = ("active", "cancelled", "expired")

STATUS_ACTIVE: Final[str] = "active"
STATUS_CANCELLED: Final[str] = "cancelled"
STATUS_EXPIRED: Final[str] = "expired"

Currency = Enum(*CURRENCIES, name="subscription_currency")
Frequency = Enum(*FREQUENCIES, name="subscription_frequency")
Category = Enum(*CATEGORIES, name="subscription_category")
SubscriptionStatus = Enum(*STATUSES, name="subscription_status")


class Subscription(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A recurring charge tracked for one user.

    Values reaching this model have already been normalized by
    :func:`subtrack.services.subscriptions.lifecycle.normalize_subscription`;
    the database constraints below are the last line of defence.

    Fields
    ------
    user_id : int
        Owner (FK → ``users.id``).
    name, price, currency, frequency, category, payment_method :
        Descriptive billing data.
    status : str
        ``active`` | ``cancelled`` | ``expired``.
    start_date, renewal_date : datetime
        Billing period boundaries (UTC).
    cancellation_date : datetime | None
        Set when the subscription is explicitly cancelled.
    """

    __tablename__ = "subscriptions"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(Currency, nullable=False, default="USD")
    frequency: Mapped[str | None] = mapped_column(Frequency, nullable=True)
    category: Mapped[str] = mapped_column(Category, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(SubscriptionStatus, nullable=False, default=STATUS_ACTIVE)
    start_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    renewal_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    cancellation_date: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    owner: Mapped[User] = relationship(back_populates="subscriptions")

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("renewal_date > start_date", name="renewal_after_start"),
        Index("ix_subscriptions_renewal_date", "renewal_date"),
    )
