# tests/integration/test_health_api.py
from __future__ import annotations

from tests.helpers.utils import API


def test_health_reports_database_status(client):
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["db"] == "ok"
    assert body["redis"] == "disabled"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get(f"{API}/nope")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == f"Route '{API}/nope' not found"
