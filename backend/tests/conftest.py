"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. The revocation
registry and reminder scheduler are replaced by in-process doubles per test.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker
from subtrack.core.config import TestingConfig
from subtrack.core.extensions import db as _db  # Flask-SQLAlchemy instance
from subtrack.factory import create_app  # application factory under test
from subtrack.services._shared.ports import (
    InMemoryReminderScheduler,
    InMemoryRevocationRegistry,
)

from tests.factories.user import DEFAULT_PASSWORD
from tests.helpers.utils import API


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    A top-level transaction is opened on the shared connection and a
    SAVEPOINT is started per test; the session joins it, so ``commit()``
    from a Unit of Work only releases the session's own SAVEPOINT and the
    final rollback discards everything.
    """
    top_trans = connection.begin()
    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)
    connection.begin_nested()

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Port doubles --------------------------------------------------------------
@pytest.fixture()
def revocations(app):
    """Fresh in-process revocation registry installed on the app."""
    registry = InMemoryRevocationRegistry(window=app.config["REVOCATION_WINDOW"])
    previous = app.extensions["revocation_registry"]
    app.extensions["revocation_registry"] = registry
    yield registry
    app.extensions["revocation_registry"] = previous


@pytest.fixture()
def reminders(app):
    """Recording reminder scheduler installed on the app."""
    scheduler = InMemoryReminderScheduler()
    previous = app.extensions.get("reminder_scheduler")
    app.extensions["reminder_scheduler"] = scheduler
    yield scheduler
    app.extensions["reminder_scheduler"] = previous


@pytest.fixture()
def token_issuer(app):
    return app.extensions["token_issuer"]


# -- HTTP helpers --------------------------------------------------------------
@pytest.fixture()
def client(app, session, revocations, reminders):
    """Flask test client bound to the transactional session and port doubles."""
    return app.test_client()


@pytest.fixture()
def auth_header(token_issuer):
    """Return a factory building ``Authorization`` headers for a user."""

    def _make(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_issuer.issue(user.id)}"}

    return _make


@pytest.fixture()
def sign_in(client):
    """Sign a user in through the API and return the issued token."""

    def _sign_in(email: str, password: str = DEFAULT_PASSWORD) -> str:
        resp = client.post(f"{API}/auth/sign-in", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()["data"]["token"]

    return _sign_in
