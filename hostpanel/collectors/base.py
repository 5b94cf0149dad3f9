from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import psutil

from hostpanel.errors import MetricsUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseCollector(ABC, Generic[T]):
    """Abstract base for on-demand host collectors.

    Subclasses implement the blocking ``read()``. The base class runs it on a
    worker thread under a timeout, keeps the last result for ``cache_ttl``
    seconds, and lets concurrent callers share a single in-flight refresh.
    """

    name: str = "base"

    def __init__(
        self,
        timeout: float = 3.0,
        cache_ttl: float = 1.0,
    ) -> None:
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._cached: tuple[float, T] | None = None
        self._inflight: asyncio.Future[T] | None = None

    # ── abstract method ─────────────────────────────────

    @abstractmethod
    def read(self) -> T:
        """Query the OS. Runs on a worker thread; may block."""
        ...

    # ── public API ──────────────────────────────────────

    async def collect(self) -> T:
        cached = self._cached
        if cached is not None and time.monotonic() - cached[0] < self.cache_ttl:
            return cached[1]

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
            self._inflight.add_done_callback(self._clear_inflight)
        # shield: one caller going away must not cancel the shared refresh
        return await asyncio.shield(self._inflight)

    def invalidate(self) -> None:
        self._cached = None

    # ── internals ───────────────────────────────────────

    async def _refresh(self) -> T:
        try:
            value = await asyncio.wait_for(asyncio.to_thread(self.read), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Collector [%s] timed out after %.1fs", self.name, self.timeout)
            raise MetricsUnavailable(f"{self.name} timed out") from exc
        except MetricsUnavailable:
            raise
        except (OSError, psutil.Error) as exc:
            logger.warning("Collector [%s] OS query failed: %s", self.name, exc)
            raise MetricsUnavailable(f"{self.name} failed") from exc

        self._cached = (time.monotonic(), value)
        return value

    def _clear_inflight(self, future: asyncio.Future[T]) -> None:
        if self._inflight is future:
            self._inflight = None
        if not future.cancelled():
            # mark retrieved even if every waiter has gone away
            future.exception()
