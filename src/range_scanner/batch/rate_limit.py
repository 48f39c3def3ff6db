"""Client-side request budget shared by the batches of one aggregator."""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Callable, Optional


class RateLimitMode(str, Enum):
    FAIL_FAST = "fail_fast"
    REJECT_REMAINING = "reject_remaining"


class LimiterState(str, Enum):
    OPEN = "open"
    EXHAUSTED = "exhausted"


class RateLimiter:
    """Counts attempts against a budget per time window.

    The window is reset lazily: whenever the limiter is queried and more than
    ``window_ms`` has elapsed since the window started, the counter drops back
    to zero. A ``budget`` of ``None`` means unbounded.
    """

    def __init__(
        self,
        budget: Optional[int] = None,
        mode: RateLimitMode = RateLimitMode.FAIL_FAST,
        window_ms: int = 60_000,
        min_interval_ms: int = 0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if budget is not None and budget < 0:
            raise ValueError("Rate budget must be non-negative")
        self.budget = budget
        self.mode = RateLimitMode(mode)
        self.window_ms = window_ms
        self.min_interval_ms = min_interval_ms
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._count = 0
        self._window_start = clock()
        self._last_attempt: float | None = None

    @property
    def count(self) -> int:
        with self._lock:
            self._maybe_reset()
            return self._count

    @property
    def state(self) -> LimiterState:
        with self._lock:
            self._maybe_reset()
            return self._state()

    def is_exhausted(self) -> bool:
        return self.state is LimiterState.EXHAUSTED

    def try_acquire(self) -> bool:
        """Spend one unit of budget if any is left.

        Check and increment happen under one lock, so concurrent batches
        sharing this limiter cannot both take the last unit.
        """
        with self._lock:
            self._maybe_reset()
            if self._state() is LimiterState.EXHAUSTED:
                return False
            self._count += 1
            return True

    def wait_turn(self) -> None:
        """Sleep until ``min_interval_ms`` has passed since the last attempt."""
        if self.min_interval_ms:
            with self._lock:
                last = self._last_attempt
            if last is not None:
                remaining = self.min_interval_ms / 1000 - (self._clock() - last)
                if remaining > 0:
                    self._sleep(remaining)
        with self._lock:
            self._last_attempt = self._clock()

    def _state(self) -> LimiterState:
        if self.budget is not None and self._count >= self.budget:
            return LimiterState.EXHAUSTED
        return LimiterState.OPEN

    def _maybe_reset(self) -> None:
        now = self._clock()
        if (now - self._window_start) * 1000 > self.window_ms:
            self._count = 0
            self._window_start = now


__all__ = ["LimiterState", "RateLimitMode", "RateLimiter"]
