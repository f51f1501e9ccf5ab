# tests/unit/core/test_extensions.py
from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest
from flask import Flask
from subtrack.core.config import DevelopmentConfig, ProductionConfig
from subtrack.core.extensions import _init_session_backends
from subtrack.infra.redis.redis_revocation_registry import RedisRevocationRegistry
from subtrack.services._shared.ports import InMemoryRevocationRegistry


class _Production(ProductionConfig):
    REDIS_URL = None
    REMINDER_SCHEDULER_URL = None
    REVOCATION_REQUIRE_SHARED_STORE = True


class _Development(DevelopmentConfig):
    REDIS_URL = None
    REMINDER_SCHEDULER_URL = None
    REVOCATION_REQUIRE_SHARED_STORE = False


def _bare_app(config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config)
    return app


def test_production_without_redis_refuses_to_start():
    app = _bare_app(_Production)

    with pytest.raises(RuntimeError, match="REDIS_URL is required"):
        _init_session_backends(app)
    assert "revocation_registry" not in app.extensions


def test_production_with_redis_uses_shared_registry():
    app = _bare_app(_Production)
    app.extensions["redis_client"] = fakeredis.FakeRedis()

    _init_session_backends(app)

    assert isinstance(app.extensions["revocation_registry"], RedisRevocationRegistry)


def test_development_falls_back_to_in_process_registry():
    app = _bare_app(_Development)

    _init_session_backends(app)

    assert isinstance(app.extensions["revocation_registry"], InMemoryRevocationRegistry)
    assert app.extensions["reminder_scheduler"] is None


def test_revocation_window_shorter_than_token_lifetime_is_rejected():
    app = _bare_app(_Development)
    app.config["REVOCATION_WINDOW"] = app.config["JWT_ACCESS_TOKEN_EXPIRES"] - timedelta(seconds=1)

    with pytest.raises(RuntimeError, match="REVOCATION_WINDOW"):
        _init_session_backends(app)
