# tests/unit/core/test_config.py
from __future__ import annotations

from subtrack.core.config import TestingConfig, engine_options


def test_sqlite_gets_no_engine_options():
    assert engine_options("sqlite:///:memory:") == {}
    assert TestingConfig.SQLALCHEMY_ENGINE_OPTIONS == engine_options(
        TestingConfig.SQLALCHEMY_DATABASE_URI
    )


def test_postgres_gets_connect_pool_and_statement_timeouts(monkeypatch):
    monkeypatch.setenv("DB_CONNECT_TIMEOUT", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT", "7")
    monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "2500")

    options = engine_options("postgresql+psycopg://app:pw@db:5432/subs")

    assert options["pool_timeout"] == 7
    assert options["pool_pre_ping"] is True
    assert options["connect_args"] == {
        "connect_timeout": 3,
        "options": "-c statement_timeout=2500",
    }


def test_mysql_gets_connect_and_read_timeouts():
    options = engine_options("mysql+pymysql://app:pw@db/subs")

    assert set(options["connect_args"]) == {"connect_timeout", "read_timeout"}
