from __future__ import annotations

import asyncio
import logging

from hostpanel.auth.credential_store import CredentialStore, check_password, hash_password
from hostpanel.auth.tokens import TokenService
from hostpanel.errors import InvalidCredentials
from hostpanel.models import IssuedToken

logger = logging.getLogger(__name__)


class Authenticator:
    """Verifies username/password pairs and issues bearer tokens.

    Unknown usernames are checked against a dummy hash of the same bcrypt
    cost, so both failure paths take the same time and raise the same error.
    """

    def __init__(self, store: CredentialStore, tokens: TokenService) -> None:
        self._store = store
        self._tokens = tokens
        self._dummy_hash = hash_password("not-a-real-password", store.bcrypt_rounds)

    async def authenticate(self, username: str, password: str) -> IssuedToken:
        user = self._store.get(username)
        stored_hash = user.password_hash if user is not None else self._dummy_hash

        matches = await asyncio.to_thread(check_password, password, stored_hash)
        if user is None or not matches:
            logger.info(
                "Login rejected for '%s' (%s)",
                username,
                "unknown user" if user is None else "wrong password",
            )
            raise InvalidCredentials("invalid username or password")

        issued = self._tokens.issue(user.username)
        logger.info("Login succeeded for '%s'", user.username)
        return issued
