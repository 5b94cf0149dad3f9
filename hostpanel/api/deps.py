from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hostpanel.auth import TokenService
from hostpanel.errors import AuthError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our MissingToken, not a 403
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def require_subject(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Gate for every protected route; returns the token subject."""
    token = credentials.credentials if credentials is not None else None
    try:
        return tokens.validate(token)
    except AuthError as exc:
        logger.debug("Rejected bearer token: %s (%s)", type(exc).__name__, exc)
        raise
