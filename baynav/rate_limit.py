"""
Per-client fixed-window rate limiter, keyed by hashed client IP.
In-process only; each worker keeps its own windows.
"""

import logging
import threading
import time
from typing import Callable, Dict, Tuple

from baynav.smart.config import RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SEC

logger = logging.getLogger(__name__)

PRUNE_EVERY_CHECKS = 100


class ClientRateLimiter:
    def __init__(
        self,
        max_requests: int = RATE_LIMIT_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SEC,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        # client hash -> (window start, count)
        self.windows: Dict[str, Tuple[float, int]] = {}
        self.checks = 0
        self.lock = threading.Lock()

    def _prune(self, now: float) -> None:
        stale = [k for k, (start, _) in self.windows.items() if now - start > self.window_seconds * 2]
        for key in stale:
            del self.windows[key]
        if stale:
            logger.debug(f"Rate limiter pruned {len(stale)} idle clients")

    def allow(self, client_hash: str) -> bool:
        """Count one request for the client; False once its window is full."""
        with self.lock:
            now = self.clock()
            self.checks += 1
            if self.checks % PRUNE_EVERY_CHECKS == 0:
                self._prune(now)

            if self.max_requests <= 0:
                return False

            window = self.windows.get(client_hash)
            if window is None or now - window[0] > self.window_seconds:
                self.windows[client_hash] = (now, 1)
                return True

            start, count = window
            if count >= self.max_requests:
                return False

            self.windows[client_hash] = (start, count + 1)
            return True
