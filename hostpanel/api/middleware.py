from __future__ import annotations

import asyncio
import logging
from typing import Callable

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestDeadlineMiddleware:
    """Bounds every HTTP request so a stuck OS query cannot pin a worker.

    ``timeout`` is a callable so the limit follows the live settings object.
    A request that overruns before sending anything gets a 503.
    """

    def __init__(self, app: ASGIApp, timeout: Callable[[], float]) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        limit = self.timeout()
        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=limit)
        except asyncio.TimeoutError:
            logger.warning("%s %s exceeded %.1fs deadline", scope.get("method"), scope.get("path"), limit)
            if started:
                raise
            response = JSONResponse(status_code=503, content={"error": "timeout"})
            await response(scope, receive, send)
