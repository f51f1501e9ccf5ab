"""Subscription endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from subtrack.api.deps import (
    current_principal,
    get_reminder_scheduler,
    get_upcoming_window,
    require_admin,
    require_auth,
    success,
    timing,
)
from subtrack.schemas import (
    SubscriptionCreateSchema,
    SubscriptionSchema,
    SubscriptionUpdateSchema,
)
from subtrack.services.subscriptions.service import SubscriptionService

bp = Blueprint("subscriptions", __name__)

create_schema = SubscriptionCreateSchema()
update_schema = SubscriptionUpdateSchema()
subscription_schema = SubscriptionSchema()
subscriptions_schema = SubscriptionSchema(many=True)


def _service() -> SubscriptionService:
    return SubscriptionService(
        reminders=get_reminder_scheduler(),
        upcoming_window=get_upcoming_window(),
    )


@bp.get("")
@require_auth
@require_admin
@timing
def list_subscriptions():
    """Return every subscription. Admins only."""

    return success(subscriptions_schema.dump(_service().list_all()))


@bp.post("")
@require_auth
@timing
def create_subscription():
    """Create a subscription for the requester and trigger its reminder."""

    data = create_schema.load(request.get_json(silent=True) or {})
    created = _service().create(current_principal().id, data)
    body = {
        "subscription": subscription_schema.dump(created.subscription),
        "workflowRunId": created.workflow_run_id,
    }
    return success(body, status=201)


@bp.get("/upcoming-renewals")
@require_auth
@timing
def upcoming_renewals():
    rows = _service().list_upcoming_renewals(current_principal())
    return success(subscriptions_schema.dump(rows))


@bp.get("/user/<int:user_id>")
@require_auth
@timing
def list_user_subscriptions(user_id: int):
    rows = _service().list_for_user(user_id, current_principal())
    return success(subscriptions_schema.dump(rows))


@bp.get("/<int:subscription_id>")
@require_auth
@timing
def get_subscription(subscription_id: int):
    sub = _service().get(subscription_id, current_principal())
    return success(subscription_schema.dump(sub))


@bp.put("/<int:subscription_id>")
@require_auth
@timing
def update_subscription(subscription_id: int):
    patch = update_schema.load(request.get_json(silent=True) or {})
    sub = _service().update(subscription_id, current_principal(), patch)
    return success(subscription_schema.dump(sub), message="Subscription updated successfully")


@bp.put("/<int:subscription_id>/cancel")
@require_auth
@timing
def cancel_subscription(subscription_id: int):
    sub = _service().cancel(subscription_id, current_principal())
    return success(subscription_schema.dump(sub), message="Subscription cancelled successfully")


@bp.delete("/<int:subscription_id>")
@require_auth
@timing
def delete_subscription(subscription_id: int):
    _service().delete(subscription_id, current_principal())
    return success(message="Subscription deleted successfully")
