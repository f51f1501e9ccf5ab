from __future__ import annotations

import hashlib
from datetime import timedelta
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from subtrack.services._shared.errors import UnavailableError


class RedisRevocationRegistry:
    """
    Denylist of revoked session tokens.

    Each entry is a ``"1"`` marker that expires after one revocation window.
    Keys hold the SHA-256 digest of the token, never the token itself.
    Any Redis failure (including client timeouts) is reported as
    :class:`UnavailableError` so callers fail closed.
    """

    resource = "Revocation registry"

    def __init__(self, r: redis.Redis, *, window: timedelta):
        self.r = r
        self.window = window

    @staticmethod
    def _k(token: str) -> str:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return f"deny:at:{digest}"

    @property
    def ttl_seconds(self) -> int:
        return max(1, int(self.window.total_seconds()))

    def revoke(self, token: str) -> bool:
        # NX keeps the first entry and its TTL; a second revoke is a no-op.
        try:
            created = self.r.set(self._k(token), "1", ex=self.ttl_seconds, nx=True)
        except RedisError as exc:
            raise UnavailableError(self.resource) from exc
        return bool(created)

    def is_revoked(self, token: str) -> bool:
        try:
            return cast(int, self.r.exists(self._k(token))) == 1
        except RedisError as exc:
            raise UnavailableError(self.resource) from exc
