from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Protocol


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RevocationRegistry(Protocol):
    """
    Record of session tokens invalidated before their natural expiry.

    Every entry lives for one fixed revocation window and then disappears.
    Implementations raise :class:`~subtrack.services._shared.errors.UnavailableError`
    when their backing store cannot be reached.
    """

    def revoke(self, token: str) -> bool:
        """Revoke ``token``. Returns ``False`` when it was already revoked."""
        ...

    def is_revoked(self, token: str) -> bool:
        """Return ``True`` while a live revocation entry exists for ``token``."""
        ...


class InMemoryRevocationRegistry(RevocationRegistry):
    """
    Process-local registry with the same TTL semantics as the Redis adapter.

    Suitable for tests and single-process development servers only.
    """

    def __init__(
        self,
        *,
        window: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.window = window
        self._clock = clock
        self._entries: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def revoke(self, token: str) -> bool:
        now = self._clock()
        with self._lock:
            self._purge(now)
            if token in self._entries:
                return False
            self._entries[token] = now + self.window
            return True

    def is_revoked(self, token: str) -> bool:
        now = self._clock()
        with self._lock:
            self._purge(now)
            return token in self._entries

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._entries)

    def _purge(self, now: datetime) -> None:
        expired = [token for token, until in self._entries.items() if until <= now]
        for token in expired:
            del self._entries[token]
