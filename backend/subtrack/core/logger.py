"""JSON logging with request correlation and credential masking."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# ``extra`` keys whose values never reach the log stream.
SENSITIVE_KEYS = frozenset({"password", "password_hash", "token", "authorization", "secret"})
REDACTED = "***"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "request_id"}


def _masked(key: str, value: Any) -> Any:
    return REDACTED if key.lower() in SENSITIVE_KEYS else value


class JSONFormatter(logging.Formatter):
    """One JSON object per record: event name, level, request id, then ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(
            (key, _masked(key, value))
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on every record; ``None`` outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return the request's correlation id, adopting an inbound header if present."""

    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        inbound = next(
            (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)),
            None,
        )
        g.request_id = inbound or str(uuid4())
    return g.request_id  # type: ignore[no-any-return]


def configure_logging(level: str | int = "INFO") -> None:
    """Send the root logger to stdout as JSON at ``level``."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed a request id per request and echo it on every response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _reset_request_state() -> None:  # pragma: no cover - integration glue
        g.pop("request_id", None)
        g.pop("principal", None)
        ensure_request_id()

    @app.after_request
    def _inject_response_header(response):  # pragma: no cover - integration glue
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter", "SENSITIVE_KEYS"]
