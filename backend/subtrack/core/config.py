"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Loads .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: int
        Value returned when the variable is unset or blank.

    Returns
    -------
    int
        Parsed integer.

    Raises
    ------
    ValueError
        If the variable is set to something that is not an integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer, got {val!r}") from exc


_TOKEN_LIFETIME_SECONDS = env_int("JWT_EXPIRES_SECONDS", 24 * 60 * 60)


def engine_options(database_uri: str) -> dict[str, Any]:
    """Build ``SQLALCHEMY_ENGINE_OPTIONS`` with client-side timeouts.

    Parameters
    ----------
    database_uri: str
        SQLAlchemy URL the options are meant for. The backend name selects
        the driver-specific connect arguments.

    Returns
    -------
    dict
        Pool checkout, connect and statement timeouts for networked
        databases, so a stalled server surfaces as ``OperationalError``.
        SQLite needs none and gets an empty mapping.
    """
    backend = database_uri.split(":", 1)[0].split("+", 1)[0]
    if backend == "sqlite":
        return {}

    connect_timeout = env_int("DB_CONNECT_TIMEOUT", 5)
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_timeout": env_int("DB_POOL_TIMEOUT", 10),
    }
    if backend == "postgresql":
        statement_ms = env_int("DB_STATEMENT_TIMEOUT_MS", 15000)
        options["connect_args"] = {
            "connect_timeout": connect_timeout,
            "options": f"-c statement_timeout={statement_ms}",
        }
    elif backend == "mysql":
        options["connect_args"] = {
            "connect_timeout": connect_timeout,
            "read_timeout": env_int("DB_READ_TIMEOUT", 15),
        }
    return options


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development placeholder.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to sign session tokens.
    JWT_ACCESS_TOKEN_EXPIRES: datetime.timedelta
        Fixed lifetime of every issued session token.
    REVOCATION_WINDOW: datetime.timedelta
        TTL of a revocation entry. Must be at least the token lifetime so a
        signed-out token can never outlive its denylist entry.
    REDIS_URL: str | None
        Redis connection string for the revocation registry. When unset an
        in-process registry is used.
    REDIS_SOCKET_TIMEOUT: float
        Seconds before a Redis call is abandoned and reported as unavailable.
    REVOCATION_REQUIRE_SHARED_STORE: bool
        Refuse to start without ``REDIS_URL``. An in-process registry is
        private to one worker, so a sign-out on one would not be seen by the
        others.
    ADMIN_EMAIL: str
        The single address whose owner is treated as administrator.
    AUTH_UNIFY_SIGNIN_ERRORS: bool
        When ``True`` unknown emails and bad passwords both answer ``401``.
    AUTH_SIGNIN_RATE_LIMIT: str
        Flask-Limiter rule applied to the sign-in and sign-up endpoints.
    SERVER_URL: str
        Public base URL of this API, used to build scheduler callbacks.
    REMINDER_SCHEDULER_URL: str | None
        Base URL of the reminder workflow scheduler. Triggers are skipped
        when unset.
    REMINDER_SCHEDULER_TOKEN: str | None
        Bearer credential presented to the scheduler.
    REMINDER_CALLBACK_PATH: str
        Path the scheduler calls back when a reminder is due.
    REMINDER_SCHEDULER_TIMEOUT: float
        HTTP timeout in seconds for trigger requests.
    UPCOMING_RENEWAL_DAYS: int
        Size of the upcoming-renewals window.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_ENGINE_OPTIONS: dict
        Engine options from :func:`engine_options` (pool, connect and
        statement timeouts).
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=_TOKEN_LIFETIME_SECONDS)
    REVOCATION_WINDOW = timedelta(
        seconds=env_int("REVOCATION_WINDOW_SECONDS", _TOKEN_LIFETIME_SECONDS + 60 * 60)
    )
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
    AUTH_UNIFY_SIGNIN_ERRORS = env_bool("AUTH_UNIFY_SIGNIN_ERRORS", False)

    # Rate limiting
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    AUTH_SIGNIN_RATE_LIMIT = os.getenv("AUTH_SIGNIN_RATE_LIMIT", "5 per minute")

    # Redis
    REDIS_URL = os.getenv("REDIS_URL") or None
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2"))
    REVOCATION_REQUIRE_SHARED_STORE = env_bool("REVOCATION_REQUIRE_SHARED_STORE", True)

    # Reminder scheduler
    SERVER_URL = os.getenv("SERVER_URL", "http://localhost:8000")
    REMINDER_SCHEDULER_URL = os.getenv("REMINDER_SCHEDULER_URL") or None
    REMINDER_SCHEDULER_TOKEN = os.getenv("REMINDER_SCHEDULER_TOKEN") or None
    REMINDER_CALLBACK_PATH = os.getenv(
        "REMINDER_CALLBACK_PATH", "/api/v1/workflows/subscription/reminder"
    )
    REMINDER_SCHEDULER_TIMEOUT = float(os.getenv("REMINDER_SCHEDULER_TIMEOUT", "5"))
    UPCOMING_RENEWAL_DAYS = env_int("UPCOMING_RENEWAL_DAYS", 7)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    REVOCATION_REQUIRE_SHARED_STORE = env_bool("REVOCATION_REQUIRE_SHARED_STORE", False)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables rate limiting.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis or the reminder scheduler.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = True
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-enough-length"
    ADMIN_EMAIL = "admin@example.com"
    RATELIMIT_ENABLED = False
    REDIS_URL = None
    REVOCATION_REQUIRE_SHARED_STORE = False
    REMINDER_SCHEDULER_URL = None


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
