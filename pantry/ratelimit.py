"""In-process sliding-window request limiter.

The window lives in the serving process only. Several processes behind a load
balancer each keep their own window, so the effective limit is multiplied by
the number of instances.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitDecision:
    allowed: bool
    retry_after: int | None = None


class SlidingWindowRateLimiter:
    """Allows at most ``max_requests`` calls per ``window_seconds``.

    Args:
        max_requests: Requests accepted within one window.
        window_seconds: Window length.
        clock: Returns the current time in seconds. Defaults to
            ``time.monotonic``.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._timestamps: list[float] = []
        self._window_start = self._clock()

    def check(self) -> RateLimitDecision:
        """Record a request if the budget allows it."""
        now = self._clock()

        if now - self._window_start >= self.window_seconds:
            self._timestamps = []
            self._window_start = now

        self._timestamps = [
            ts for ts in self._timestamps if now - ts < self.window_seconds
        ]

        if len(self._timestamps) >= self.max_requests:
            oldest = min(self._timestamps)
            retry_after = math.ceil(self.window_seconds - (now - oldest))
            return RateLimitDecision(allowed=False, retry_after=retry_after)

        self._timestamps.append(now)
        return RateLimitDecision(allowed=True)

    @property
    def pending(self) -> int:
        """Number of requests counted in the current window."""
        return len(self._timestamps)
