"""Record identifier generation."""

import threading
import time
from typing import Callable


class MonotonicIdGenerator:
    """
    Issues decimal-string IDs from a nanosecond clock.

    Every ID is strictly greater than the one before it in this process,
    even when the clock stalls or steps backwards.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns):
        self._clock_ns = clock_ns
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            value = max(self._clock_ns(), self._last + 1)
            self._last = value
            return str(value)
