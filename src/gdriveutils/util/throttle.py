from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)


class Throttle:
    """
    Allow at most ``max_calls`` calls per ``interval_sec`` (sliding window).

    ``wait()`` blocks until the next call may start. ``max_calls <= 0`` or
    ``interval_sec <= 0`` disables throttling.
    """

    def __init__(
        self,
        max_calls: int,
        interval_sec: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_calls = max_calls
        self.interval_sec = interval_sec
        self._clock = clock
        self._sleep = sleep
        self._starts: deque[float] = deque()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.max_calls > 0 and self.interval_sec > 0

    def wait(self) -> None:
        if not self.enabled:
            return

        with self._lock:
            now = self._clock()
            while self._starts and now - self._starts[0] >= self.interval_sec:
                self._starts.popleft()

            if len(self._starts) >= self.max_calls:
                delay = self.interval_sec - (now - self._starts[0])
                if delay > 0:
                    logger.debug("Throttling request for %.3fs", delay)
                    self._sleep(delay)
                now = self._clock()
                self._starts.popleft()

            self._starts.append(now)
