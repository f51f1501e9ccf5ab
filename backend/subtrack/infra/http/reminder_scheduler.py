"""HTTP client for a QStash-compatible workflow scheduler."""

from __future__ import annotations

import logging
import requests

from subtrack.services._shared.errors import ReminderTriggerError

logger = logging.getLogger(__name__)


class HttpReminderScheduler:
    """
    Publish reminder triggers to the scheduler's ``/v2/publish`` endpoint.

    This targets the QStash message-publish API, not the Upstash Workflow
    trigger client. Publish answers with a ``messageId``; a
    ``workflowRunId`` is reported instead when the scheduler sends one. The
    scheduler later calls ``callback_url`` with the same JSON body. This
    client never retries and asks the scheduler not to retry either.

    :param base_url: Scheduler base URL (e.g. ``https://qstash.example``).
    :param token: Bearer credential for the scheduler.
    :param callback_url: Absolute URL the scheduler should invoke.
    :param timeout: Seconds to wait for the scheduler to answer.
    :param session: Optional ``requests.Session`` to reuse connections.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None,
        callback_url: str,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.callback_url = callback_url
        self.timeout = timeout
        self.http = session or requests.Session()

    @property
    def publish_url(self) -> str:
        return f"{self.base_url}/v2/publish/{self.callback_url}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Upstash-Retries": "0"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def trigger(self, subscription_id: int) -> str | None:
        try:
            response = self.http.post(
                self.publish_url,
                json={"subscriptionId": subscription_id},
                headers=self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ReminderTriggerError(f"Reminder trigger failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        run_id = None
        if isinstance(body, dict):
            run_id = body.get("workflowRunId") or body.get("messageId")
        logger.debug(
            "reminder.triggered",
            extra={"subscription_id": subscription_id, "workflow_run_id": run_id},
        )
        return run_id
