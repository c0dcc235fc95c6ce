from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable

from hubspot_mcp import config


class SlidingWindowLimiter:
    """Admit at most `ceiling` requests in any trailing `window` seconds.

    Admission looks at the oldest timestamp still inside the window; when the
    window is full the caller sleeps until that timestamp ages out (plus a small
    margin). Entries are never evicted early, so the window never holds more
    than `ceiling` timestamps.

    The lock is held while sleeping so that threads queue behind each other
    instead of all waking on the same expiring slot.
    """

    def __init__(
        self,
        window: float = config.RATE_WINDOW_SECONDS,
        ceiling: int = config.RATE_CEILING,
        margin: float = config.RATE_SAFETY_MARGIN_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.window = window
        self.ceiling = ceiling
        self.margin = margin
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._timestamps)

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window:
            self._timestamps.popleft()

    def acquire(self) -> float:
        """Block until a request may be issued and record it. Returns seconds waited."""
        with self._lock:
            waited = 0.0
            now = self._clock()
            self._prune(now)
            while len(self._timestamps) >= self.ceiling:
                wait = self.window - (now - self._timestamps[0]) + self.margin
                if wait > 0:
                    self._sleep(wait)
                    waited += wait
                now = self._clock()
                self._prune(now)
            self._timestamps.append(now)
            return waited
