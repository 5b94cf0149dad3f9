from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Mapping

import bcrypt

from hostpanel.config import DEFAULT_ADMIN_PASSWORD
from hostpanel.db import database as db
from hostpanel.models import UserRecord

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # unparseable stored hash
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class CredentialStore:
    """Read-mostly set of operator accounts backed by the ``users`` table.

    Readers see an immutable mapping that is swapped wholesale after every
    write, so lookups never take a lock. Writes are serialised by an
    ``asyncio.Lock``.
    """

    def __init__(self, bcrypt_rounds: int = 12) -> None:
        self.bcrypt_rounds = bcrypt_rounds
        self._users: Mapping[str, UserRecord] = MappingProxyType({})
        self._write_lock = asyncio.Lock()

    # ── lifecycle ────────────────────────────────────────

    async def load(self) -> None:
        users = await db.get_users()
        self._users = MappingProxyType({u.username: u for u in users})
        logger.info("Credential store loaded (%d user(s))", len(users))

    async def ensure_provisioned(self, username: str, password: str) -> bool:
        """Create the first account when the store is empty.

        Returns True if an account was created.
        """
        async with self._write_lock:
            if await db.count_users() > 0:
                if not self._users:
                    await self.load()
                return False

            password_hash = await asyncio.to_thread(
                hash_password, password, self.bcrypt_rounds
            )
            await db.insert_user(UserRecord(username=username, password_hash=password_hash))
            await self.load()

        logger.info("Provisioned initial account '%s'", username)
        return True

    async def uses_default_password(self) -> list[str]:
        """Usernames whose password is still the built-in default."""
        flagged = []
        for user in self._users.values():
            if await asyncio.to_thread(check_password, DEFAULT_ADMIN_PASSWORD, user.password_hash):
                flagged.append(user.username)
        return flagged

    # ── reads ────────────────────────────────────────────

    def get(self, username: str) -> UserRecord | None:
        return self._users.get(username)

    def __len__(self) -> int:
        return len(self._users)

    def __contains__(self, username: object) -> bool:
        return username in self._users
