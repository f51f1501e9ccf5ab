"""
Subscription normalization.

Every write path (create, update, cancel) funnels the full subscription state
through :func:`normalize_subscription` before anything reaches the session.
The function is pure: it receives "now" from the caller and returns a new
mapping, so renewal derivation and expiry are testable without a database.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, Final

from subtrack.models.subscription import (
    CATEGORIES,
    CURRENCIES,
    FREQUENCIES,
    STATUS_ACTIVE,
    STATUS_CANCELLED,
    STATUS_EXPIRED,
    STATUSES,
)
from subtrack.services._shared.errors import ValidationFailedError

RENEWAL_PERIODS: Final[dict[str, timedelta]] = {
    "daily": timedelta(days=1),
    "weekly": timedelta(days=7),
    "monthly": timedelta(days=30),
    "yearly": timedelta(days=365),
}

NAME_MIN, NAME_MAX = 2, 100
PAYMENT_METHOD_MAX = 100

FIELDS: Final[tuple[str, ...]] = (
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
)


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def derive_renewal_date(start_date: datetime, frequency: str) -> datetime:
    """Return ``start_date`` advanced by one billing period."""
    return start_date + RENEWAL_PERIODS[frequency]


def _check_choice(errors, field, value, choices, *, required=True) -> None:
    if value is None:
        if required:
            errors.setdefault(field, []).append("Missing data for required field.")
        return
    if value not in choices:
        errors.setdefault(field, []).append(f"Must be one of: {', '.join(choices)}.")


def _check_text(errors, field, value, *, min_len: int, max_len: int) -> str | None:
    if value is None:
        errors.setdefault(field, []).append("Missing data for required field.")
        return None
    text = str(value).strip()
    if not min_len <= len(text) <= max_len:
        errors.setdefault(field, []).append(
            f"Length must be between {min_len} and {max_len}."
        )
    return text


def normalize_subscription(
    state: Mapping[str, Any],
    *,
    now: datetime,
    enforce_start_in_past: bool = True,
) -> dict[str, Any]:
    """
    Validate a complete subscription state and apply the derived rules.

    Rules, in order:

    1. Text fields are trimmed; enums, lengths and ``price >= 0`` are checked.
    2. ``start_date`` must not lie in the future (when ``enforce_start_in_past``).
    3. A missing ``renewal_date`` is derived from ``start_date`` and
       ``frequency``; ``frequency`` is therefore required in that case.
    4. ``renewal_date`` must be strictly after ``start_date``.
    5. A ``cancelled`` state without a cancellation timestamp is stamped.
    6. A ``renewal_date`` already in the past forces ``status = expired``.

    :param state: Current field values (snake_case keys from :data:`FIELDS`).
    :param now: Aware UTC "now".
    :param enforce_start_in_past: Check rule 2. Updates that leave the start
        date untouched skip it.
    :returns: A new mapping holding every key in :data:`FIELDS`.
    :raises ValidationFailedError: Listing every violated field.
    """
    errors: dict[str, list[str]] = {}
    out: dict[str, Any] = {k: state.get(k) for k in FIELDS}

    out["name"] = _check_text(errors, "name", out["name"], min_len=NAME_MIN, max_len=NAME_MAX)
    out["payment_method"] = _check_text(
        errors, "paymentMethod", out["payment_method"], min_len=1, max_len=PAYMENT_METHOD_MAX
    )

    price = out["price"]
    if price is None:
        errors.setdefault("price", []).append("Missing data for required field.")
    elif isinstance(price, bool) or not isinstance(price, (int, float)):
        errors.setdefault("price", []).append("Not a valid number.")
    elif price < 0:
        errors.setdefault("price", []).append("Price must be greater than or equal to 0.")
    else:
        out["price"] = float(price)

    out["currency"] = out["currency"] or "USD"
    out["status"] = out["status"] or STATUS_ACTIVE
    _check_choice(errors, "currency", out["currency"], CURRENCIES)
    _check_choice(errors, "frequency", out["frequency"], FREQUENCIES, required=False)
    _check_choice(errors, "category", out["category"], CATEGORIES)
    _check_choice(errors, "status", out["status"], STATUSES)

    start = as_utc(out["start_date"])
    renewal = as_utc(out["renewal_date"])
    out["cancellation_date"] = as_utc(out["cancellation_date"])

    if start is None:
        errors.setdefault("startDate", []).append("Missing data for required field.")
    elif enforce_start_in_past and start > now:
        errors.setdefault("startDate", []).append("Start date must be in the past")

    if renewal is None and start is not None:
        if out["frequency"] is None:
            errors.setdefault("frequency", []).append(
                "Frequency is required when no renewal date is given."
            )
        elif out["frequency"] in RENEWAL_PERIODS:
            renewal = derive_renewal_date(start, out["frequency"])

    if renewal is not None and start is not None and renewal <= start:
        errors.setdefault("renewalDate", []).append("Renewal date must be after the start date")

    if errors:
        raise ValidationFailedError(errors)

    if out["status"] == STATUS_CANCELLED and out["cancellation_date"] is None:
        out["cancellation_date"] = now
    if renewal < now:
        out["status"] = STATUS_EXPIRED

    out["start_date"] = start
    out["renewal_date"] = renewal
    return out
