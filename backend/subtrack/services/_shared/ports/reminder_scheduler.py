from __future__ import annotations

from typing import Protocol


class ReminderScheduler(Protocol):
    """
    Fire-and-forget trigger for the renewal reminder workflow.

    Delivery and retries belong to the external scheduler.
    """

    def trigger(self, subscription_id: int) -> str | None:
        """
        Ask the scheduler to start the reminder workflow for one subscription.

        :returns: The scheduler's run identifier, when it reports one.
        :raises ReminderTriggerError: If the scheduler rejects or does not answer.
        """
        ...


class InMemoryReminderScheduler(ReminderScheduler):
    """Record triggers instead of calling out; used by tests and local runs."""

    def __init__(self) -> None:
        self.triggered: list[int] = []

    def trigger(self, subscription_id: int) -> str | None:
        self.triggered.append(subscription_id)
        return f"wfr_{len(self.triggered)}"
