from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class RateWindow:
    count: int
    window_start: float


class FixedWindowRateLimiter:
    """Fixed window counter for calls against an upstream provider.

    Grants at most ``max_calls`` per window. The window restarts on the
    first call made after ``window_start + window_seconds``. Bursts of up
    to twice the cap across a window edge are accepted.

    ``try_acquire`` never awaits, so under a single event loop the
    check-then-increment cannot interleave with another request.
    """

    def __init__(
        self,
        max_calls: int = 5,
        window_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_calls < 1:
            raise ValueError("max_calls must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._count = 0
        self._window_start = clock()

    @property
    def window(self) -> RateWindow:
        return RateWindow(count=self._count, window_start=self._window_start)

    def try_acquire(self, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        self._roll(now)
        if self._count >= self.max_calls:
            return False
        self._count += 1
        return True

    def retry_after(self, now: Optional[float] = None) -> float:
        """Seconds until a call would be granted again."""
        now = self._clock() if now is None else now
        if now - self._window_start > self.window_seconds or self._count < self.max_calls:
            return 0.0
        return max(0.0, self._window_start + self.window_seconds - now)

    def _roll(self, now: float) -> None:
        if now - self._window_start > self.window_seconds:
            self._count = 0
            self._window_start = now
