from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TokenClaims(BaseModel):
    """Decoded bearer token. The signature itself lives in the encoded form."""

    model_config = ConfigDict(frozen=True)

    subject: str
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    claims: TokenClaims
