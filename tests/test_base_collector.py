"""Tests for hostpanel.collectors.base — timeout, cache and single-flight."""

from __future__ import annotations

import asyncio
import threading
import time

import psutil
import pytest

from hostpanel.collectors.base import BaseCollector
from hostpanel.errors import MetricsUnavailable


class StubCollector(BaseCollector[int]):
    """Collector that counts its reads."""

    name = "stub"

    def __init__(self, delay: float = 0.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self.delay = delay
        self.read_count = 0
        self._lock = threading.Lock()

    def read(self) -> int:
        with self._lock:
            self.read_count += 1
            count = self.read_count
        if self.delay:
            time.sleep(self.delay)
        return count


class ErrorCollector(BaseCollector[int]):
    name = "error"

    def __init__(self, exc: Exception, **kwargs) -> None:
        super().__init__(**kwargs)
        self.exc = exc

    def read(self) -> int:
        raise self.exc


# ── caching ─────────────────────────────────────────────


class TestCache:
    async def test_cached_within_ttl(self):
        c = StubCollector(cache_ttl=60.0)
        assert await c.collect() == 1
        assert await c.collect() == 1
        assert c.read_count == 1

    async def test_refreshes_after_ttl(self):
        c = StubCollector(cache_ttl=0.05)
        assert await c.collect() == 1
        await asyncio.sleep(0.1)
        assert await c.collect() == 2

    async def test_zero_ttl_always_reads(self):
        c = StubCollector(cache_ttl=0.0)
        await c.collect()
        await c.collect()
        assert c.read_count == 2

    async def test_invalidate(self):
        c = StubCollector(cache_ttl=60.0)
        await c.collect()
        c.invalidate()
        assert await c.collect() == 2


# ── concurrency ───────────────────────────────────────


class TestSingleFlight:
    async def test_concurrent_callers_share_one_read(self):
        c = StubCollector(delay=0.1, cache_ttl=0.0)
        results = await asyncio.gather(*(c.collect() for _ in range(5)))
        assert results == [1] * 5
        assert c.read_count == 1

    async def test_cancelled_caller_does_not_cancel_refresh(self):
        c = StubCollector(delay=0.1, cache_ttl=60.0)
        first = asyncio.create_task(c.collect())
        await asyncio.sleep(0.01)
        second = asyncio.create_task(c.collect())
        await asyncio.sleep(0.01)
        first.cancel()
        assert await second == 1


# ── failures ──────────────────────────────────────────


class TestFailures:
    async def test_timeout(self):
        c = StubCollector(delay=0.5, timeout=0.05, cache_ttl=0.0)
        with pytest.raises(MetricsUnavailable):
            await c.collect()

    async def test_os_error(self):
        c = ErrorCollector(OSError("device not ready"))
        with pytest.raises(MetricsUnavailable) as exc:
            await c.collect()
        assert isinstance(exc.value.__cause__, OSError)

    async def test_psutil_error(self):
        c = ErrorCollector(psutil.AccessDenied(pid=1))
        with pytest.raises(MetricsUnavailable):
            await c.collect()

    async def test_unexpected_error_propagates(self):
        c = ErrorCollector(RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            await c.collect()

    async def test_failure_is_not_cached(self):
        c = ErrorCollector(OSError("boom"), cache_ttl=60.0)
        with pytest.raises(MetricsUnavailable):
            await c.collect()
        assert c._cached is None
        assert c._inflight is None

    def test_status_code(self):
        assert MetricsUnavailable.status_code == 503
