"""
subtrack.services._shared.ports
===============================

*Ports* (hexagonal interfaces) that keep the service layer independent from
the JWT library, the revocation store and the reminder scheduler.

Modules
-------
- :mod:`token_issuer`:
    :class:`~.TokenIssuer` and :class:`~.TokenClaims`; mint/verify tokens.
- :mod:`revocation_registry`:
    :class:`~.RevocationRegistry` plus an in-process implementation.
- :mod:`reminder_scheduler`:
    :class:`~.ReminderScheduler` plus a recording implementation.

Concrete adapters (Flask-JWT-Extended, Redis, HTTP) live under
``subtrack.infra``.
"""

from __future__ import annotations

from .reminder_scheduler import InMemoryReminderScheduler, ReminderScheduler
from .revocation_registry import InMemoryRevocationRegistry, RevocationRegistry
from .token_issuer import TokenClaims, TokenIssuer

__all__ = [
    "TokenIssuer",
    "TokenClaims",
    "RevocationRegistry",
    "InMemoryRevocationRegistry",
    "ReminderScheduler",
    "InMemoryReminderScheduler",
]
