from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hostpanel.api.middleware import RequestDeadlineMiddleware
from hostpanel.api.routes import router
from hostpanel.auth import Authenticator, CredentialStore, LoginThrottle, TokenService, generate_secret
from hostpanel.collectors import ProcessEnumerator, SystemSampler
from hostpanel.config import DEFAULT_ADMIN_PASSWORD, settings
from hostpanel.db import database as db
from hostpanel.errors import AuthError, InternalFault, PanelError, TooManyAttempts

logger = logging.getLogger(__name__)


async def _open_credential_store() -> CredentialStore:
    """Load users, creating the initial account on first run.

    Any failure here aborts startup: a panel nobody can log into is useless.
    """
    store = CredentialStore(bcrypt_rounds=settings.bcrypt_rounds)
    try:
        await db.init_db()
        await store.load()
        await store.ensure_provisioned(settings.admin_username, settings.admin_password)
    except Exception:
        logger.critical("Could not provision the credential store at %s", settings.db_path, exc_info=True)
        raise

    flagged = await store.uses_default_password()
    for username in flagged:
        logger.warning(
            "!!! Account '%s' still uses the default password '%s'. "
            "Set HOSTPANEL_ADMIN_PASSWORD before first start or replace the account. !!!",
            username,
            DEFAULT_ADMIN_PASSWORD,
        )
    return store


def _token_service() -> TokenService:
    secret = settings.secret_key
    if not secret:
        secret = generate_secret()
        logger.info("No HOSTPANEL_SECRET_KEY set; using a per-process secret (tokens end with the process)")
    return TokenService(secret, ttl=timedelta(hours=settings.token_ttl_hours))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    store = await _open_credential_store()
    token_service = _token_service()

    app.state.credential_store = store
    app.state.token_service = token_service
    app.state.authenticator = Authenticator(store, token_service)
    app.state.login_throttle = LoginThrottle(
        max_failures=settings.login_max_failures,
        window_seconds=settings.login_window_seconds,
    )
    app.state.sampler = SystemSampler(
        timeout=settings.collect_timeout,
        cache_ttl=settings.cache_ttl,
        cpu_window=settings.cpu_window_seconds,
        baseline_max_age=settings.baseline_max_age,
        disk_path=settings.disk_path,
        aggregate_disks=settings.aggregate_disks,
    )
    app.state.enumerator = ProcessEnumerator(
        timeout=settings.collect_timeout,
        cache_ttl=settings.cache_ttl,
        cpu_window=settings.cpu_window_seconds,
        baseline_max_age=settings.baseline_max_age,
        default_limit=settings.process_limit,
    )

    logger.info("%s started (%d account(s))", settings.app_name, len(store))

    yield

    # ── shutdown ──────────────────────────────────────
    logger.info("%s shut down", settings.app_name)


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# added first so CORS wraps it and timeout responses carry CORS headers
app.add_middleware(RequestDeadlineMiddleware, timeout=lambda: settings.request_timeout)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


# ── error translation ─────────────────────────────────


@app.exception_handler(PanelError)
async def panel_error_handler(request: Request, exc: PanelError) -> JSONResponse:
    if isinstance(exc, AuthError):
        logger.info("%s %s -> 401 (%s)", request.method, request.url.path, type(exc).__name__)
    elif isinstance(exc, InternalFault):
        logger.error("%s %s -> internal fault", request.method, request.url.path, exc_info=exc)
    else:
        logger.warning("%s %s -> %d (%s: %s)", request.method, request.url.path, exc.status_code, type(exc).__name__, exc)

    headers = None
    if isinstance(exc, TooManyAttempts):
        headers = {"Retry-After": str(int(exc.retry_after) + 1)}
    elif isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.category}, headers=headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    fault = InternalFault()
    return JSONResponse(status_code=fault.status_code, content={"error": fault.category})


