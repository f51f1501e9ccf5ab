"""Request authentication: bearer token → verified, non-revoked, existing user."""

from __future__ import annotations

import logging
from typing import NoReturn

from subtrack.services._shared.base import BaseService
from subtrack.services._shared.dto import Principal
from subtrack.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ExpiredTokenError,
    MalformedTokenError,
    UnavailableError,
)
from subtrack.services._shared.policies.common import is_admin
from subtrack.services._shared.ports import RevocationRegistry, TokenIssuer

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the credential from an ``Authorization: Bearer <token>`` header.

    :param authorization: Raw header value, possibly ``None``.
    :returns: The token, or ``None`` when the header is absent or not bearer.
    """
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    return parts[1]


class AuthorizationGuard(BaseService):
    """
    Resolve a presented token to a :class:`Principal` or reject it.

    Steps, in order: token present → signature and expiry valid → not
    revoked → user still exists. Every rejection is an
    :class:`AuthenticationError`. An unreachable revocation registry raises
    :class:`UnavailableError` so the request fails closed.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        revocations: RevocationRegistry,
        admin_email: str | None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.tokens = token_issuer
        self.revocations = revocations
        self.admin_email = admin_email

    def authorize(self, token: str | None) -> Principal:
        """
        Authenticate ``token``.

        :param token: Bearer credential or ``None``.
        :returns: The resolved principal with its admin flag.
        :raises AuthenticationError: On any rejection.
        :raises UnavailableError: If the revocation registry is unreachable.
        """
        if not token:
            self._reject("no_token")

        try:
            claims = self.tokens.verify(token)
        except ExpiredTokenError:
            self._reject("expired")
        except MalformedTokenError:
            self._reject("malformed")

        try:
            revoked = self.revocations.is_revoked(token)
        except UnavailableError:
            logger.error("auth.rejected", extra={"reason": "registry_unavailable"})
            raise
        if revoked:
            self._reject("revoked")

        try:
            user_id = int(claims.user_id)
        except ValueError:
            self._reject("malformed")

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                self._reject("user_not_found")
            return Principal(
                id=user.id,
                email=user.email,
                is_admin=is_admin(user, self.admin_email),
            )

    @staticmethod
    def ensure_admin(principal: Principal | None) -> Principal:
        """
        Admit only an already authorized admin principal.

        :raises AuthenticationError: If no principal was resolved first.
        :raises AuthorizationError: If the principal is not an admin.
        """
        if principal is None:
            raise AuthenticationError()
        if not principal.is_admin:
            raise AuthorizationError("Access denied. Admins only.")
        return principal

    @staticmethod
    def _reject(reason: str) -> NoReturn:
        logger.info("auth.rejected", extra={"reason": reason})
        raise AuthenticationError()
