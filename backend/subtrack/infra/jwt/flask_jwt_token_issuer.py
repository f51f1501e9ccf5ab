# subtrack/infra/jwt/flask_jwt_token_issuer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from subtrack.services._shared.errors import ExpiredTokenError, MalformedTokenError
from subtrack.services._shared.ports import TokenClaims, TokenIssuer


@dataclass(slots=True)
class JWTTokenIssuer(TokenIssuer):
    """
    Adapter for Flask-JWT-Extended.

    Lifetime and signing key come from ``JWT_ACCESS_TOKEN_EXPIRES`` and
    ``JWT_SECRET_KEY``.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def issue(self, user_id: int | str) -> str:
        from flask_jwt_extended import create_access_token

        return str(create_access_token(identity=str(user_id)))

    def verify(self, token: str) -> TokenClaims:
        return self._decode(token, allow_expired=False)

    def decode(self, token: str) -> TokenClaims:
        return self._decode(token, allow_expired=True)

    def _decode(self, token: str, *, allow_expired: bool) -> TokenClaims:
        from flask_jwt_extended import decode_token

        try:
            raw = decode_token(token, allow_expired=allow_expired)
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except (PyJWTError, JWTExtendedException) as exc:
            raise MalformedTokenError() from exc
        return self._to_claims(raw)

    @staticmethod
    def _to_claims(raw: dict[str, Any]) -> TokenClaims:
        try:
            subject = raw["sub"]
            issued_at = datetime.fromtimestamp(int(raw["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(raw["exp"]), tz=UTC)
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedTokenError("Token is missing required claims") from exc
        return TokenClaims(user_id=str(subject), issued_at=issued_at, expires_at=expires_at)
