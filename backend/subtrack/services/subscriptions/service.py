# subtrack/services/subscriptions/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from subtrack.models.subscription import STATUS_CANCELLED, Subscription
from subtrack.services._shared.base import BaseService
from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import NotFoundError, ReminderTriggerError
from subtrack.services._shared.ports import ReminderScheduler
from subtrack.services.subscriptions.dto import CreatedSubscriptionOut, SubscriptionOut
from subtrack.services.subscriptions.lifecycle import FIELDS, normalize_subscription
from subtrack.uow.sqlalchemy_uow import SQLAlchemyRepositoryContainer

logger = logging.getLogger(__name__)


def _state_of(sub: Subscription) -> dict[str, Any]:
    return {field: getattr(sub, field) for field in FIELDS}


class SubscriptionService(BaseService):
    """
    Subscription records: create, read, patch, cancel, delete and list.

    Every write re-runs :func:`normalize_subscription` on the full state.
    Every read-by-id and every mutation checks ownership through
    :meth:`BaseService.ensure_access` before touching the row.
    """

    def __init__(
        self,
        *,
        reminders: ReminderScheduler | None = None,
        upcoming_window: timedelta = timedelta(days=7),
        **kwargs,
    ) -> None:
        """
        :param reminders: Scheduler port; ``None`` disables reminder triggers.
        :param upcoming_window: Horizon for :meth:`list_upcoming_renewals`.
        """
        super().__init__(**kwargs)
        self.reminders = reminders
        self.upcoming_window = upcoming_window

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #
    def create(self, owner_id: int, fields: Mapping[str, Any]) -> CreatedSubscriptionOut:
        """
        Persist a subscription owned by ``owner_id`` and trigger its reminder.

        The reminder is requested only after the commit. A trigger failure is
        logged and reported as a missing run id; the subscription stays.

        :param owner_id: Authenticated requester; never taken from input.
        :param fields: Snake-case subscription fields.
        :raises ValidationFailedError: On any invariant violation.
        :raises NotFoundError: If the owner no longer exists.
        """
        state = normalize_subscription(fields, now=self.now_utc())
        with self.rw_uow() as uow:
            if uow.users.get(owner_id) is None:
                raise NotFoundError("User", owner_id)
            sub = uow.subscriptions.add(Subscription(user_id=owner_id, **state))
            out = SubscriptionOut.from_model(sub)

        logger.info(
            "subscription.created",
            extra={"subscription_id": out.id, "user_id": owner_id, "status": out.status},
        )
        run_id = self._trigger_reminder(out.id)
        return CreatedSubscriptionOut(subscription=out, workflow_run_id=run_id)

    def _trigger_reminder(self, subscription_id: int) -> str | None:
        if self.reminders is None:
            logger.info("reminder.skipped", extra={"subscription_id": subscription_id})
            return None
        try:
            return self.reminders.trigger(subscription_id)
        except ReminderTriggerError as exc:
            logger.warning(
                "reminder.trigger_failed",
                extra={"subscription_id": subscription_id, "error": str(exc)},
            )
            return None

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #
    def get(self, subscription_id: int, requester: Principal) -> SubscriptionOut:
        with self.ro_uow() as uow:
            sub = self._load(uow, subscription_id)
            self.ensure_access(
                requester, sub.user_id, msg="You are not authorized to view this subscription"
            )
            return SubscriptionOut.from_model(sub)

    def list_all(self) -> list[SubscriptionOut]:
        with self.ro_uow() as uow:
            return [SubscriptionOut.from_model(s) for s in uow.subscriptions.list()]

    def list_for_user(self, user_id: int, requester: Principal) -> list[SubscriptionOut]:
        """
        List the subscriptions owned by ``user_id``.

        :raises AuthorizationError: Unless the requester is that user or an admin.
        """
        self.ensure_access(
            requester,
            user_id,
            msg="Unauthorized access. You can only view your own subscriptions.",
        )
        with self.ro_uow() as uow:
            return [SubscriptionOut.from_model(s) for s in uow.subscriptions.list_by_owner(user_id)]

    def list_upcoming_renewals(self, requester: Principal) -> list[SubscriptionOut]:
        """
        Subscriptions renewing within ``[now, now + upcoming_window]``.

        Admins see every owner's subscriptions; everyone else only their own.
        """
        now = self.now_utc()
        owner = None if requester.is_admin else requester.id
        with self.ro_uow() as uow:
            rows = uow.subscriptions.list_renewing_between(
                now, now + self.upcoming_window, user_id=owner
            )
            return [SubscriptionOut.from_model(s) for s in rows]

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #
    def update(
        self, subscription_id: int, requester: Principal, patch: Mapping[str, Any]
    ) -> SubscriptionOut:
        """
        Apply a field-wise patch and re-check every invariant.

        The start-date-in-the-past rule is only enforced when the patch moves
        the start date. The stored renewal date is kept when only
        ``frequency`` or ``start_date`` change; it is derived only when absent.
        """
        with self.rw_uow() as uow:
            sub = self._load(uow, subscription_id)
            self.ensure_access(
                requester, sub.user_id, msg="You are not authorized to update this subscription"
            )
            merged = {**_state_of(sub), **patch}
            state = normalize_subscription(
                merged, now=self.now_utc(), enforce_start_in_past="start_date" in patch
            )
            uow.subscriptions.assign_updates(sub, state)
            out = SubscriptionOut.from_model(sub)

        logger.info(
            "subscription.updated",
            extra={"subscription_id": subscription_id, "fields": sorted(patch)},
        )
        return out

    def cancel(self, subscription_id: int, requester: Principal) -> SubscriptionOut:
        """
        Mark a subscription cancelled and stamp the cancellation date.

        The renewal date is left as is, so a lapsed subscription still ends
        up ``expired``.
        """
        with self.rw_uow() as uow:
            sub = self._load(uow, subscription_id)
            self.ensure_access(
                requester, sub.user_id, msg="You are not authorized to cancel this subscription"
            )
            now = self.now_utc()
            merged = {**_state_of(sub), "status": STATUS_CANCELLED, "cancellation_date": now}
            state = normalize_subscription(merged, now=now, enforce_start_in_past=False)
            uow.subscriptions.assign_updates(sub, state)
            out = SubscriptionOut.from_model(sub)

        logger.info(
            "subscription.cancelled",
            extra={"subscription_id": subscription_id, "status": out.status},
        )
        return out

    def delete(self, subscription_id: int, requester: Principal) -> None:
        with self.rw_uow() as uow:
            sub = self._load(uow, subscription_id)
            self.ensure_access(
                requester, sub.user_id, msg="You are not authorized to delete this subscription"
            )
            uow.subscriptions.delete(sub)
        logger.info("subscription.deleted", extra={"subscription_id": subscription_id})

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    @staticmethod
    def _load(uow: SQLAlchemyRepositoryContainer, subscription_id: int) -> Subscription:
        sub = uow.subscriptions.get(subscription_id)
        if sub is None:
            raise NotFoundError("Subscription", subscription_id)
        return sub
