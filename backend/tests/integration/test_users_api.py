# tests/integration/test_users_api.py
from __future__ import annotations

from subtrack.models.subscription import Subscription
from subtrack.models.user import User

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import API, error_body

USERS = f"{API}/users"


def test_list_users_requires_admin(client, auth_header):
    admin = UserFactory(email="admin@example.com")
    UserFactory()

    assert client.get(USERS, headers=auth_header(UserFactory())).status_code == 403
    resp = client.get(USERS, headers=auth_header(admin))
    assert resp.status_code == 200
    users = resp.get_json()["data"]
    assert len(users) == 3
    assert all("password" not in u and "password_hash" not in u for u in users)


def test_get_self(client, auth_header):
    user = UserFactory(name="Grace Hopper")
    resp = client.get(f"{USERS}/{user.id}", headers=auth_header(user))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "Grace Hopper"


def test_get_other_user_is_403(client, auth_header):
    user, other = UserFactory(), UserFactory()
    resp = client.get(f"{USERS}/{other.id}", headers=auth_header(user))
    assert resp.status_code == 403
    assert error_body(resp)["error"] == "Forbidden: You are not allowed to access this user's data."


def test_admin_gets_missing_user_404(client, auth_header):
    admin = UserFactory(email="admin@example.com")
    resp = client.get(f"{USERS}/999999", headers=auth_header(admin))
    assert resp.status_code == 404


def test_update_self(client, auth_header):
    user = UserFactory()
    resp = client.put(f"{USERS}/{user.id}", json={"name": "New Name"}, headers=auth_header(user))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "New Name"


def test_update_email_to_taken_is_409(client, auth_header):
    user, other = UserFactory(), UserFactory()
    resp = client.put(f"{USERS}/{user.id}", json={"email": other.email}, headers=auth_header(user))
    assert resp.status_code == 409


def test_delete_self_cascades_and_invalidates_access(client, auth_header, session):
    sub = SubscriptionFactory()
    user_id, sub_id = sub.owner.id, sub.id
    headers = auth_header(sub.owner)

    resp = client.delete(f"{USERS}/{user_id}", headers=headers)

    assert resp.status_code == 200
    assert session.get(User, user_id) is None
    assert session.get(Subscription, sub_id) is None
    assert client.get(f"{USERS}/{user_id}", headers=headers).status_code == 401
