from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claims carried by a session token.

    :param user_id: Subject identifier (``sub``), always a string.
    :type user_id: str
    :param issued_at: ``iat`` as an aware UTC datetime.
    :type issued_at: datetime
    :param expires_at: ``exp`` as an aware UTC datetime.
    :type expires_at: datetime
    """

    user_id: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer(Protocol):
    """
    Mint and verify signed session tokens.

    Verification only covers signature and expiry. Revocation state is the
    caller's concern (see :class:`~.RevocationRegistry`).
    """

    def issue(self, user_id: int | str) -> str:
        """Return a signed token for ``user_id`` with the configured lifetime."""
        ...

    def verify(self, token: str) -> TokenClaims:
        """
        Validate signature and expiry.

        :raises MalformedTokenError: If the token cannot be parsed or verified.
        :raises ExpiredTokenError: If the token is past its expiry.
        """
        ...

    def decode(self, token: str) -> TokenClaims:
        """
        Decode a signed token while tolerating expiry.

        :raises MalformedTokenError: If the token cannot be parsed or verified.
        """
        ...
