"""Rate limiter — sliding-window attempt counter keyed by client identifier."""

import math
import time
from collections.abc import Callable


class RateLimitExceeded(Exception):
    def __init__(self, retry_after: int):
        super().__init__(f"Too many attempts, retry after {retry_after}s")
        self.retry_after = retry_after


class SlidingWindowRateLimiter:
    """Allows ``max_attempts`` per ``window_seconds`` for each key.

    Attempts are recorded when allowed; rejected attempts do not extend the window.
    Keys whose attempts have all aged out are swept at most once per window.
    """

    def __init__(
        self,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: dict[str, list[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._attempts)

    def _sweep(self, now: float) -> None:
        stale = [k for k, times in self._attempts.items() if not times or now - times[-1] >= self.window_seconds]
        for key in stale:
            del self._attempts[key]
        self._last_sweep = now

    def hit(self, key: str) -> None:
        """Record an attempt for ``key`` or raise RateLimitExceeded."""
        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        recent = [t for t in self._attempts.get(key, []) if now - t < self.window_seconds]
        if len(recent) >= self.max_attempts:
            self._attempts[key] = recent
            raise RateLimitExceeded(math.ceil(recent[0] + self.window_seconds - now))
        recent.append(now)
        self._attempts[key] = recent

    def reset(self, key: str | None = None) -> None:
        if key is None:
            self._attempts.clear()
        else:
            self._attempts.pop(key, None)
