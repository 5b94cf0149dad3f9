from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """Operator account as stored in the credential store."""

    model_config = ConfigDict(frozen=True)

    username: str
    password_hash: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
