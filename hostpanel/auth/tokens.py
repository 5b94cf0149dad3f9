from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from hostpanel.errors import ExpiredToken, MalformedToken, MissingToken
from hostpanel.models import IssuedToken, TokenClaims

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def generate_secret() -> str:
    return secrets.token_urlsafe(48)


class TokenService:
    """Issues and validates HS256 bearer tokens.

    Validation is a pure function of the token, the signing secret and
    ``now``: there is no session table and no revocation list.
    """

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24)) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl

    def issue(self, subject: str, now: datetime | None = None) -> IssuedToken:
        if now is None:
            now = datetime.now(timezone.utc)
        issued_at = now.replace(microsecond=0)
        expires_at = issued_at + self.ttl
        payload = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        claims = TokenClaims(
            subject=subject,
            issued_at=issued_at,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
        return IssuedToken(token=token, claims=claims)

    def decode(self, token: str | None, now: datetime | None = None) -> TokenClaims:
        """Verify signature first, then expiry."""
        if not token:
            raise MissingToken("no bearer token supplied")
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc

        subject = payload.get("sub")
        exp = payload.get("exp")
        iat = payload.get("iat", exp)
        if not isinstance(subject, str) or not subject:
            raise MalformedToken("token has no subject")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise MalformedToken("token has no valid expiry")
        if not isinstance(iat, (int, float)) or isinstance(iat, bool):
            raise MalformedToken("token has no valid issue time")

        claims = TokenClaims(
            subject=subject,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
        if now >= claims.expires_at:
            raise ExpiredToken(f"token expired at {claims.expires_at.isoformat()}")
        return claims

    def validate(self, token: str | None, now: datetime | None = None) -> str:
        """Return the token subject or raise an ``AuthError``."""
        return self.decode(token, now).subject
