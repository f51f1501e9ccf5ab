"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

logger = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)
redis_client: redis.Redis | None = None


def init_app(app: Flask) -> None:
    """Initialize persistence, JWT, rate limiting and the session backends.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`subtrack.models` package so SQLAlchemy metadata is ready for
        migrations, then registers the token issuer, revocation registry and
        reminder scheduler under ``app.extensions``.

    Raises
    ------
    RuntimeError
        If Redis is configured but unreachable, if it is required but not
        configured, or if the revocation window is shorter than the token
        lifetime.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from subtrack import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    _init_redis(app)
    _init_session_backends(app)


def _init_redis(app: Flask) -> None:
    """Connect to Redis when ``REDIS_URL`` is configured."""
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    timeout = float(app.config.get("REDIS_SOCKET_TIMEOUT", 2))
    redis_client = redis.Redis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def _init_session_backends(app: Flask) -> None:
    """Register the adapters behind the token, revocation and reminder ports."""
    from subtrack.infra.http.reminder_scheduler import HttpReminderScheduler
    from subtrack.infra.jwt.flask_jwt_token_issuer import JWTTokenIssuer
    from subtrack.infra.redis.redis_revocation_registry import RedisRevocationRegistry
    from subtrack.services._shared.ports import InMemoryRevocationRegistry

    lifetime = app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    window = app.config["REVOCATION_WINDOW"]
    if window < lifetime:
        raise RuntimeError(
            f"REVOCATION_WINDOW ({window}) must be >= JWT_ACCESS_TOKEN_EXPIRES ({lifetime})"
        )

    app.extensions["token_issuer"] = JWTTokenIssuer()

    client = app.extensions.get("redis_client")
    if client is not None:
        app.extensions["revocation_registry"] = RedisRevocationRegistry(client, window=window)
    elif app.config.get("REVOCATION_REQUIRE_SHARED_STORE", True):
        raise RuntimeError(
            "REDIS_URL is required: an in-process revocation registry is not shared "
            "between workers"
        )
    else:
        logger.info("Using in-process revocation registry (REDIS_URL not set)")
        app.extensions["revocation_registry"] = InMemoryRevocationRegistry(window=window)

    scheduler_url = app.config.get("REMINDER_SCHEDULER_URL")
    if scheduler_url:
        callback = app.config["SERVER_URL"].rstrip("/") + app.config["REMINDER_CALLBACK_PATH"]
        app.extensions["reminder_scheduler"] = HttpReminderScheduler(
            base_url=scheduler_url,
            token=app.config.get("REMINDER_SCHEDULER_TOKEN"),
            callback_url=callback,
            timeout=float(app.config.get("REMINDER_SCHEDULER_TIMEOUT", 5)),
        )
    else:
        app.extensions["reminder_scheduler"] = None


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
