# tests/unit/infra/test_http_reminder_scheduler.py
from __future__ import annotations

import json
import re

import pytest
import requests
import responses
from responses import matchers
from subtrack.infra.http.reminder_scheduler import HttpReminderScheduler
from subtrack.services._shared.errors import ReminderTriggerError

BASE = "https://qstash.example"
CALLBACK = "http://localhost:8000/api/v1/workflows/subscription/reminder"
PUBLISH = re.compile(re.escape(BASE) + r"/v2/publish/.+")


@pytest.fixture()
def scheduler() -> HttpReminderScheduler:
    return HttpReminderScheduler(base_url=BASE + "/", token="qs-token", callback_url=CALLBACK)


@responses.activate
def test_trigger_posts_subscription_id_and_returns_run_id(scheduler):
    responses.post(
        PUBLISH,
        json={"workflowRunId": "wfr_123"},
        match=[
            matchers.json_params_matcher({"subscriptionId": 5}),
            matchers.header_matcher(
                {"Authorization": "Bearer qs-token", "Upstash-Retries": "0"}
            ),
        ],
    )

    assert scheduler.trigger(5) == "wfr_123"
    assert len(responses.calls) == 1


@responses.activate
def test_trigger_falls_back_to_message_id(scheduler):
    responses.post(PUBLISH, json={"messageId": "msg_9"})
    assert scheduler.trigger(5) == "msg_9"


@responses.activate
def test_trigger_without_json_body_has_no_run_id(scheduler):
    responses.post(PUBLISH, body="accepted")
    assert scheduler.trigger(5) is None


@responses.activate
def test_error_status_raises_trigger_error(scheduler):
    responses.post(PUBLISH, status=500, json={"error": "boom"})
    with pytest.raises(ReminderTriggerError):
        scheduler.trigger(5)


@responses.activate
def test_timeout_raises_trigger_error(scheduler):
    responses.post(PUBLISH, body=requests.exceptions.ConnectTimeout("timed out"))
    with pytest.raises(ReminderTriggerError, match="timed out"):
        scheduler.trigger(5)


@responses.activate
def test_no_authorization_header_without_token():
    scheduler = HttpReminderScheduler(base_url=BASE, token=None, callback_url=CALLBACK)
    responses.post(PUBLISH, json={})

    scheduler.trigger(1)

    request = responses.calls[0].request
    assert "Authorization" not in request.headers
    assert json.loads(request.body) == {"subscriptionId": 1}


@responses.activate
def test_callback_url_is_the_publish_destination(scheduler):
    responses.post(PUBLISH, json={})

    scheduler.trigger(1)

    url = responses.calls[0].request.url
    assert url.startswith(f"{BASE}/v2/publish/")
    assert url.endswith("/api/v1/workflows/subscription/reminder")
