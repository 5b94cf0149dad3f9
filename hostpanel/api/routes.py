from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from hostpanel.api.deps import require_subject
from hostpanel.config import settings
from hostpanel.errors import InvalidCredentials

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


# ── auth ──────────────────────────────────────────────


@router.post("/api/login")
async def login(body: LoginRequest, request: Request) -> TokenResponse:
    state = request.app.state
    client_key = request.client.host if request.client else "unknown"

    # reserved before the first await; a failed attempt keeps its slot
    stamp = state.login_throttle.acquire(client_key)
    try:
        issued = await state.authenticator.authenticate(body.username, body.password)
    except InvalidCredentials:
        raise
    except BaseException:
        state.login_throttle.release(client_key, stamp)
        raise
    state.login_throttle.reset(client_key)
    return TokenResponse(token=issued.token)


@router.get("/api/session")
async def get_session(subject: str = Depends(require_subject)) -> dict:
    return {"subject": subject}


# ── telemetry ─────────────────────────────────────────


@router.get("/api/system", dependencies=[Depends(require_subject)])
async def get_system(request: Request) -> dict:
    snapshot = await request.app.state.sampler.sample()
    return snapshot.to_api()


@router.get("/api/processes", dependencies=[Depends(require_subject)])
async def get_processes(
    request: Request,
    limit: int = Query(default=settings.process_limit, ge=1, le=settings.max_process_limit),
) -> list[dict]:
    processes = await request.app.state.enumerator.top_processes(limit)
    return [p.to_api() for p in processes]
