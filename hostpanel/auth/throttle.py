from __future__ import annotations

import time

from hostpanel.errors import TooManyAttempts


class LoginThrottle:
    """Counts login attempts per client key inside a sliding window.

    ``acquire()`` checks the count and reserves the attempt in one synchronous
    step, so concurrent requests cannot all slip past the limit while their
    password checks are still running. A failed attempt keeps its reservation;
    ``reset()`` clears the key after a successful login and ``release()`` drops
    a reservation that ended neither way. Keys whose attempts have all aged
    out are swept once per window. ``max_failures <= 0`` disables throttling.
    """

    def __init__(self, max_failures: int = 5, window_seconds: float = 60.0) -> None:
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._attempts: dict[str, list[float]] = {}
        self._last_sweep = 0.0

    def acquire(self, key: str, now: float | None = None) -> float | None:
        """Reserve an attempt for ``key`` or raise ``TooManyAttempts``.

        Returns the reservation stamp to hand back to ``release()``.
        """
        if self.max_failures <= 0:
            return None
        if now is None:
            now = time.monotonic()
        self._sweep(now)

        recent = self._prune(key, now)
        if len(recent) >= self.max_failures:
            retry_after = recent[0] + self.window_seconds - now
            raise TooManyAttempts(max(retry_after, 0.0))
        recent.append(now)
        self._attempts[key] = recent
        return now

    def release(self, key: str, stamp: float | None) -> None:
        attempts = self._attempts.get(key)
        if stamp is None or not attempts:
            return
        try:
            attempts.remove(stamp)
        except ValueError:
            return
        if not attempts:
            del self._attempts[key]

    def reset(self, key: str) -> None:
        self._attempts.pop(key, None)

    def __len__(self) -> int:
        return len(self._attempts)

    def _prune(self, key: str, now: float) -> list[float]:
        cutoff = now - self.window_seconds
        recent = [t for t in self._attempts.get(key, ()) if t > cutoff]
        if not recent:
            self._attempts.pop(key, None)
        return recent

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        cutoff = now - self.window_seconds
        stale = [k for k, stamps in self._attempts.items() if not stamps or stamps[-1] <= cutoff]
        for k in stale:
            del self._attempts[k]
