"""Client-side pacing for REST calls.

SharePoint Online throttles tenants that burst; spacing calls out on our side
keeps long reconciliation runs from tripping HTTP 429 in the first place.
"""

import time
from collections import deque


class RateLimiter:
    """Sliding-window limiter.

    Example:
        >>> limiter = RateLimiter(requests_per_period=600, period_seconds=60)
        >>> limiter.wait_if_needed()  # Blocks only when the window is full
    """

    def __init__(self, requests_per_period: int, period_seconds: float):
        """Initialize rate limiter.

        Args:
            requests_per_period: Maximum number of calls allowed per window
            period_seconds: Window length in seconds
        """
        if requests_per_period < 1:
            raise ValueError("requests_per_period must be at least 1")
        self.requests_per_period = requests_per_period
        self.period_seconds = period_seconds
        self.request_times: deque[float] = deque()

    def _expire(self, now: float) -> None:
        while self.request_times and self.request_times[0] <= now - self.period_seconds:
            self.request_times.popleft()

    def wait_if_needed(self) -> float:
        """Block until another call fits in the window, then record it.

        Returns:
            Seconds spent sleeping (0.0 when no wait was needed)
        """
        now = time.monotonic()
        self._expire(now)

        slept = 0.0
        if len(self.request_times) >= self.requests_per_period:
            slept = self.period_seconds - (now - self.request_times[0])
            if slept > 0:
                time.sleep(slept)
            now = time.monotonic()
            self._expire(now)

        self.request_times.append(now)
        return max(slept, 0.0)

    def reset(self) -> None:
        """Forget all recorded calls."""
        self.request_times.clear()
