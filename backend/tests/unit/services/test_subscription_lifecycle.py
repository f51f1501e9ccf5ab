# tests/unit/services/test_subscription_lifecycle.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from subtrack.services._shared.errors import ValidationFailedError
from subtrack.services.subscriptions.lifecycle import (
    RENEWAL_PERIODS,
    as_utc,
    derive_renewal_date,
    normalize_subscription,
)

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


def _state(**overrides):
    state = {
        "name": "Netflix Premium",
        "price": 15.99,
        "currency": "USD",
        "frequency": "monthly",
        "category": "entertainment",
        "payment_method": "Credit Card",
        "start_date": datetime(2024, 1, 1, tzinfo=UTC),
        "renewal_date": None,
    }
    state.update(overrides)
    return state


def test_monthly_plan_derives_renewal_thirty_days_later():
    out = normalize_subscription(_state(), now=NOW)

    assert out["renewal_date"] == datetime(2024, 1, 31, tzinfo=UTC)
    assert out["status"] == "active"
    assert out["renewal_date"] > out["start_date"]


@pytest.mark.parametrize(
    ("frequency", "days"),
    [("daily", 1), ("weekly", 7), ("monthly", 30), ("yearly", 365)],
)
def test_derive_renewal_date_uses_fixed_periods(frequency, days):
    start = datetime(2023, 6, 1, tzinfo=UTC)
    assert derive_renewal_date(start, frequency) == start + timedelta(days=days)
    assert RENEWAL_PERIODS[frequency] == timedelta(days=days)


def test_supplied_renewal_date_is_kept():
    renewal = datetime(2024, 3, 1, tzinfo=UTC)
    out = normalize_subscription(_state(renewal_date=renewal, frequency=None), now=NOW)
    assert out["renewal_date"] == renewal
    assert out["frequency"] is None


def test_past_renewal_forces_expired_regardless_of_input():
    out = normalize_subscription(
        _state(start_date=datetime(2023, 1, 1, tzinfo=UTC), status="active"), now=NOW
    )
    assert out["renewal_date"] == datetime(2023, 1, 31, tzinfo=UTC)
    assert out["status"] == "expired"


def test_renewal_must_follow_start():
    with pytest.raises(ValidationFailedError) as exc:
        normalize_subscription(
            _state(renewal_date=datetime(2023, 12, 1, tzinfo=UTC)), now=NOW
        )
    assert exc.value.errors == {"renewalDate": ["Renewal date must be after the start date"]}


def test_future_start_is_rejected_on_create():
    with pytest.raises(ValidationFailedError) as exc:
        normalize_subscription(_state(start_date=NOW + timedelta(days=1)), now=NOW)
    assert "startDate" in exc.value.errors
    assert "Start date must be in the past" in str(exc.value)


def test_future_start_is_tolerated_when_not_enforced():
    out = normalize_subscription(
        _state(start_date=NOW + timedelta(days=1)), now=NOW, enforce_start_in_past=False
    )
    assert out["renewal_date"] == NOW + timedelta(days=31)


def test_frequency_required_without_renewal_date():
    with pytest.raises(ValidationFailedError) as exc:
        normalize_subscription(_state(frequency=None), now=NOW)
    assert list(exc.value.errors) == ["frequency"]


def test_violations_are_aggregated():
    with pytest.raises(ValidationFailedError) as exc:
        normalize_subscription(
            _state(name=" x ", price=-1, currency="BTC", category="games", payment_method="  "),
            now=NOW,
        )
    assert set(exc.value.errors) == {"name", "price", "currency", "category", "paymentMethod"}
    message = str(exc.value)
    assert message.startswith("Validation failed: ")
    for field in ("name", "price", "currency", "category", "paymentMethod"):
        assert f"{field}:" in message


def test_text_fields_are_trimmed_and_defaults_applied():
    out = normalize_subscription(
        _state(name="  Spotify  ", payment_method=" PayPal ", currency=None), now=NOW
    )
    assert out["name"] == "Spotify"
    assert out["payment_method"] == "PayPal"
    assert out["currency"] == "USD"
    assert out["status"] == "active"


def test_cancelled_state_is_stamped():
    out = normalize_subscription(_state(status="cancelled"), now=NOW)
    assert out["status"] == "cancelled"
    assert out["cancellation_date"] == NOW


def test_lapsed_cancellation_still_expires():
    out = normalize_subscription(
        _state(start_date=datetime(2023, 1, 1, tzinfo=UTC), status="cancelled"), now=NOW
    )
    assert out["status"] == "expired"
    assert out["cancellation_date"] == NOW


def test_naive_datetimes_are_taken_as_utc():
    naive = datetime(2024, 1, 1)
    assert as_utc(naive) == datetime(2024, 1, 1, tzinfo=UTC)
    out = normalize_subscription(_state(start_date=naive), now=NOW)
    assert out["start_date"].tzinfo is not None


def test_input_mapping_is_not_mutated():
    state = _state()
    normalize_subscription(state, now=NOW)
    assert state["renewal_date"] is None
