# tests/unit/services/test_user_service.py
from __future__ import annotations

import pytest
from subtrack.models.subscription import Subscription
from subtrack.models.user import User
from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import AuthorizationError, ConflictError, NotFoundError
from subtrack.services.users.service import UserService

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import principal_of

ADMIN = Principal(id=0, email="admin@example.com", is_admin=True)


@pytest.fixture()
def service() -> UserService:
    return UserService()


def test_list_users_never_exposes_password(service):
    UserFactory.create_batch(2)

    users = service.list_users()

    assert len(users) == 2
    assert all(not hasattr(u, "password_hash") for u in users)


def test_get_user_self_or_admin(service):
    user = UserFactory()

    assert service.get_user(user.id, principal_of(user)).email == user.email
    assert service.get_user(user.id, ADMIN).id == user.id


def test_get_user_checks_access_before_existence(service):
    stranger = principal_of(UserFactory())
    with pytest.raises(AuthorizationError, match="not allowed to access this user"):
        service.get_user(424_242, stranger)
    with pytest.raises(NotFoundError):
        service.get_user(424_242, ADMIN)


def test_update_user_changes_profile_and_password(service, session):
    user = UserFactory(password="old-secret")

    out = service.update_user(
        user.id, principal_of(user), {"name": "Grace", "password": "new-secret"}
    )

    assert out.name == "Grace"
    reloaded = session.get(User, user.id)
    assert reloaded.verify_password("new-secret")
    assert not reloaded.verify_password("old-secret")


def test_update_user_email_conflict(service):
    user = UserFactory()
    other = UserFactory()

    with pytest.raises(ConflictError):
        service.update_user(user.id, principal_of(user), {"email": other.email.upper()})


def test_update_user_keeping_own_email_is_allowed(service):
    user = UserFactory()
    out = service.update_user(user.id, principal_of(user), {"email": user.email})
    assert out.email == user.email


def test_update_other_user_is_forbidden(service):
    user, other = UserFactory(), UserFactory()
    with pytest.raises(AuthorizationError):
        service.update_user(other.id, principal_of(user), {"name": "Mallory"})


def test_delete_user_cascades_to_subscriptions(service, session):
    sub = SubscriptionFactory()
    owner_id, sub_id = sub.owner.id, sub.id

    service.delete_user(owner_id, principal_of(sub.owner))

    assert session.get(User, owner_id) is None
    assert session.get(Subscription, sub_id) is None
