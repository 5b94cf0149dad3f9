from __future__ import annotations

import threading
import time
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class CounterWindow(Generic[T]):
    """Pairs two reads of a monotonically increasing counter.

    Rates such as CPU percentage only make sense over an interval. ``span()``
    returns ``(before, after, elapsed)``: the previous reading is reused as
    ``before`` when it is between ``min_window`` and ``max_age`` seconds old,
    otherwise a fresh pair is taken ``min_window`` seconds apart.
    """

    def __init__(
        self,
        read: Callable[[], T],
        min_window: float = 0.25,
        max_age: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._read = read
        self.min_window = min_window
        self.max_age = max_age
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._baseline: tuple[float, T] | None = None

    def span(self) -> tuple[T, T, float]:
        after = self._read()
        t_after = self._clock()
        baseline = self._swap_baseline(t_after, after)

        if baseline is not None:
            elapsed = t_after - baseline[0]
            if self.min_window <= elapsed <= self.max_age:
                return baseline[1], after, elapsed

        before, t_before = after, t_after
        self._sleep(self.min_window)
        after = self._read()
        t_after = self._clock()
        self._swap_baseline(t_after, after)
        return before, after, t_after - t_before

    def reset(self) -> None:
        with self._lock:
            self._baseline = None

    def _swap_baseline(self, at: float, reading: T) -> tuple[float, T] | None:
        with self._lock:
            previous = self._baseline
            if previous is None or previous[0] <= at:
                self._baseline = (at, reading)
            return previous
