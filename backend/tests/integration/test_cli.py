# tests/integration/test_cli.py
from __future__ import annotations

from sqlalchemy import select
from subtrack.cli.users import users_cli
from subtrack.models.user import User

from tests.factories.user import UserFactory


def test_create_admin(app, session):
    runner = app.test_cli_runner()

    result = runner.invoke(users_cli, ["create-admin", "--name", "Root", "--password", "s3cret!"])

    assert result.exit_code == 0, result.output
    assert "Created admin account admin@example.com" in result.output
    user = session.execute(select(User).where(User.email == "admin@example.com")).scalar_one()
    assert user.verify_password("s3cret!")


def test_create_admin_when_present(app):
    UserFactory(email="admin@example.com")
    runner = app.test_cli_runner()

    result = runner.invoke(users_cli, ["create-admin", "--password", "s3cret!"])

    assert result.exit_code == 0
    assert "already exists" in result.output
