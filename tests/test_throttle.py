"""Tests for hostpanel.auth.throttle."""

from __future__ import annotations

import pytest

from hostpanel.auth.throttle import LoginThrottle
from hostpanel.errors import TooManyAttempts


class TestLoginThrottle:
    def test_allows_until_limit(self):
        t = LoginThrottle(max_failures=3, window_seconds=60)
        for i in range(3):
            t.acquire("1.2.3.4", now=float(i))
        with pytest.raises(TooManyAttempts) as exc:
            t.acquire("1.2.3.4", now=3.0)
        assert exc.value.retry_after == pytest.approx(57.0)

    def test_reservation_counts_before_outcome(self):
        # attempts still in flight already count against the limit
        t = LoginThrottle(max_failures=2, window_seconds=60)
        t.acquire("k", now=0.0)
        t.acquire("k", now=0.0)
        with pytest.raises(TooManyAttempts):
            t.acquire("k", now=0.0)

    def test_window_slides(self):
        t = LoginThrottle(max_failures=2, window_seconds=10)
        t.acquire("k", now=0.0)
        t.acquire("k", now=1.0)
        with pytest.raises(TooManyAttempts):
            t.acquire("k", now=5.0)
        t.acquire("k", now=10.5)  # first attempt aged out

    def test_keys_are_independent(self):
        t = LoginThrottle(max_failures=1, window_seconds=60)
        t.acquire("a", now=0.0)
        with pytest.raises(TooManyAttempts):
            t.acquire("a", now=1.0)
        t.acquire("b", now=1.0)

    def test_reset(self):
        t = LoginThrottle(max_failures=1, window_seconds=60)
        t.acquire("a", now=0.0)
        t.reset("a")
        t.acquire("a", now=1.0)

    def test_release_returns_the_slot(self):
        t = LoginThrottle(max_failures=1, window_seconds=60)
        stamp = t.acquire("a", now=0.0)
        t.release("a", stamp)
        assert len(t) == 0
        t.acquire("a", now=1.0)

    def test_release_unknown_stamp_is_noop(self):
        t = LoginThrottle(max_failures=2, window_seconds=60)
        t.acquire("a", now=0.0)
        t.release("a", 42.0)
        t.release("b", 0.0)
        assert len(t) == 1

    def test_stale_keys_are_swept(self):
        t = LoginThrottle(max_failures=5, window_seconds=10)
        for i in range(1000):
            t.acquire(f"10.0.{i // 256}.{i % 256}", now=1.0)
        assert len(t) == 1000

        t.acquire("192.168.1.1", now=20.0)
        assert len(t) == 1

    def test_disabled(self):
        t = LoginThrottle(max_failures=0)
        for i in range(100):
            assert t.acquire("a", now=float(i)) is None
        assert len(t) == 0

    def test_status_code(self):
        assert TooManyAttempts(5).status_code == 429
