# subtrack/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from subtrack.services._shared.base import BaseService
from subtrack.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    MissingTokenError,
    NotFoundError,
    violates,
)
from subtrack.services._shared.ports import RevocationRegistry, TokenIssuer
from subtrack.services.auth.dto import AuthOut, SignInIn, SignUpIn
from subtrack.services.users.dto import UserPublicOut

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "User already exists"


class AuthService(BaseService):
    """
    Session lifecycle: sign-up, sign-in and sign-out.

    Tokens are minted through the :class:`TokenIssuer` port and sign-out
    records the token in the :class:`RevocationRegistry` port; neither
    implementation is known here.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        revocations: RevocationRegistry,
        unify_signin_errors: bool = False,
        **kwargs,
    ) -> None:
        """
        :param token_issuer: Port used to mint and decode session tokens.
        :param revocations: Port recording signed-out tokens.
        :param unify_signin_errors: Answer unknown email and wrong password
            with the same ``AuthenticationError``.
        """
        super().__init__(**kwargs)
        self.tokens = token_issuer
        self.revocations = revocations
        self.unify_signin_errors = unify_signin_errors

    # ------------------------------------------------------------------ #
    # Sign-up
    # ------------------------------------------------------------------ #
    def sign_up(self, dto: SignUpIn) -> AuthOut:
        """
        Register a user and issue a session token in one transaction.

        The existence check, the insert and token issuance share a Unit of
        Work; any failure rolls the insert back. A concurrent registration
        that slips past the existence check hits ``uq_users_email`` and is
        reported as the same conflict.

        :raises ConflictError: If the email is already registered.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise ConflictError("User", _DUPLICATE_EMAIL)
                user = uow.users.create(name=dto.name, email=dto.email, password=dto.password)
                out = UserPublicOut.from_model(user)
                token = self.tokens.issue(out.id)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                raise ConflictError("User", _DUPLICATE_EMAIL) from exc
            raise

        logger.info("auth.signed_up", extra={"user_id": out.id})
        return AuthOut(token=token, user=out)

    # ------------------------------------------------------------------ #
    # Sign-in
    # ------------------------------------------------------------------ #
    def sign_in(self, dto: SignInIn) -> AuthOut:
        """
        Verify credentials and issue a session token.

        :raises NotFoundError: Unknown email (unless errors are unified).
        :raises AuthenticationError: Wrong password, or any failure when
            errors are unified.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                logger.info("auth.signin_failed", extra={"reason": "unknown_email"})
                if self.unify_signin_errors:
                    raise AuthenticationError("Invalid credentials")
                raise NotFoundError("User", dto.email)
            if not user.verify_password(dto.password):
                logger.info(
                    "auth.signin_failed", extra={"reason": "bad_password", "user_id": user.id}
                )
                raise AuthenticationError(
                    "Invalid credentials" if self.unify_signin_errors else "Invalid password"
                )
            out = UserPublicOut.from_model(user)

        token = self.tokens.issue(out.id)
        logger.info("auth.signed_in", extra={"user_id": out.id})
        return AuthOut(token=token, user=out)

    # ------------------------------------------------------------------ #
    # Sign-out
    # ------------------------------------------------------------------ #
    def sign_out(self, token: str | None) -> None:
        """
        Revoke the presented token.

        The token is decoded without enforcing expiry, so an expired session
        can still be signed out. Revoking an already revoked token is a no-op.

        :raises MissingTokenError: If no token was presented.
        :raises MalformedTokenError: If the token is not one of ours.
        :raises UnavailableError: If the registry cannot be reached.
        """
        if not token:
            raise MissingTokenError()
        claims = self.tokens.decode(token)
        newly_revoked = self.revocations.revoke(token)
        logger.info(
            "auth.signed_out",
            extra={"user_id": claims.user_id, "already_revoked": not newly_revoked},
        )
