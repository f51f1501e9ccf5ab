# tests/unit/services/test_policies.py
from __future__ import annotations

from types import SimpleNamespace

import pytest
from subtrack.services._shared.dto import Principal
from subtrack.services._shared.policies.common import can_access, is_admin, is_owner


def test_is_owner_compares_ids_loosely():
    assert is_owner(actor_id=7, owner_id="7")
    assert not is_owner(actor_id=7, owner_id=8)


@pytest.mark.parametrize(
    ("email", "admin_email", "expected"),
    [
        ("admin@example.com", "admin@example.com", True),
        ("Admin@Example.com", " admin@example.com ", True),
        ("user@example.com", "admin@example.com", False),
        ("admin@example.com", "", False),
        ("admin@example.com", None, False),
    ],
)
def test_is_admin(email, admin_email, expected):
    assert is_admin(SimpleNamespace(email=email), admin_email) is expected


@pytest.mark.parametrize(
    ("requester", "owner_id", "expected"),
    [
        (Principal(id=1, email="a@x.io"), 1, True),
        (Principal(id=2, email="b@x.io"), 1, False),
        (Principal(id=2, email="admin@x.io", is_admin=True), 1, True),
    ],
)
def test_can_access(requester, owner_id, expected):
    assert can_access(requester, owner_id) is expected
