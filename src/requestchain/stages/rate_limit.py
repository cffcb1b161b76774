"""
=============================================================================
RATE LIMITING STAGE
=============================================================================

Caps how many requests one client may send inside a trailing time
window, using the Sliding Window Log algorithm.

=============================================================================
SLIDING WINDOW LOG
=============================================================================

For every client we keep the timestamps of its admitted requests. On
each call the log is pruned to the timestamps newer than
(now - window), and the request is admitted only if fewer than `limit`
remain.

    ┌─────────────────────────────────────────────────────────────────────┐
    │              SLIDING WINDOW (limit=5, window=60s)                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   time ──────────────────────────────────────────────────────►      │
    │                                                                      │
    │        t=0  t=1  t=2  t=3  t=4  t=5                t=61             │
    │         ●    ●    ●    ●    ●    ✗                  ●               │
    │         │                        │                  │               │
    │         │                        │                  └── t=0 has     │
    │         │                        │                      left the    │
    │         │                        │                      window:     │
    │         │                        │                      admitted    │
    │         │                        └── 5 in [t-60, t]: 429            │
    │         └── first request of client-1                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Unlike a fixed window there is no boundary burst: at any instant the
client has been admitted at most `limit` times in the last `window`
seconds. Pruning happens inline on every call; there is no background
eviction thread.

=============================================================================
CONCURRENCY
=============================================================================

Many requests can be in flight at once and they all share the same
per-client logs. The check ("fewer than limit?") and the record
("append now") happen under one lock, so two requests racing for the
last free slot cannot both be admitted. The lock is released before
delegating; no lock is held across an await.

=============================================================================
"""

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Optional

from .base import Stage
from ..errors import ChainConfigurationError
from ..handlers.base import Handler
from ..http.request import Request
from ..http.response import Response, too_many_requests


logger = logging.getLogger(__name__)

ANONYMOUS_CLIENT = "anonymous"


@dataclass
class SlidingWindow:
    """
    Timestamp log of one client's admitted requests, oldest first.

    Not thread-safe on its own; RateLimitStage guards it with its lock.
    """

    timestamps: Deque[float] = field(default_factory=deque)

    def prune(self, cutoff: float) -> None:
        """Drop timestamps at or before ``cutoff``."""
        while self.timestamps and self.timestamps[0] <= cutoff:
            self.timestamps.popleft()

    def try_acquire(self, now: float, limit: int) -> bool:
        """Record ``now`` and return True if fewer than ``limit`` are logged."""
        if len(self.timestamps) < limit:
            self.timestamps.append(now)
            return True
        return False

    def retry_after(self, now: float, window: float) -> float:
        """Seconds until the oldest timestamp leaves the window."""
        if not self.timestamps:
            return 0.0
        return max(0.0, self.timestamps[0] + window - now)

    def __len__(self) -> int:
        return len(self.timestamps)


class RateLimitStage(Stage):
    """
    Per-client sliding window rate limiter.

    =========================================================================
    RESPONSE HEADERS
    =========================================================================

    Admitted requests get:
        X-RateLimit-Limit: 5
        X-RateLimit-Remaining: 3

    Rejected requests (429) get:
        Retry-After: 12            (seconds, rounded up)
        X-RateLimit-Limit: 5
        X-RateLimit-Remaining: 0

    =========================================================================
    """

    def __init__(
        self,
        downstream: Handler,
        limit: int = 5,
        window: float = 60.0,
        key_func: Optional[Callable[[Request], str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            downstream: Handler to forward admitted requests to.
            limit: Requests admitted per client per window.
            window: Window length in seconds.
            key_func: Extracts the client key from a request. Defaults to
                      the client id header, or "anonymous" without one.
            clock: Monotonic time source, injectable for tests.
        """
        super().__init__(downstream)

        if limit < 1:
            raise ChainConfigurationError(f"limit must be >= 1, got {limit}")
        if window <= 0:
            raise ChainConfigurationError(f"window must be > 0, got {window}")

        self.limit = limit
        self.window = window
        self.key_func = key_func or self._default_key_func
        self._clock = clock

        self._windows: Dict[str, SlidingWindow] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @staticmethod
    def _default_key_func(request: Request) -> str:
        return request.client_id or ANONYMOUS_CLIENT

    async def handle(self, request: Request) -> Response:
        key = self.key_func(request)
        now = self._clock()

        # Check and record atomically; delegate outside the lock.
        with self._lock:
            self._maybe_sweep(now)
            log = self._windows.setdefault(key, SlidingWindow())
            log.prune(now - self.window)
            admitted = log.try_acquire(now, self.limit)
            remaining = self.limit - len(log)
            retry_after = 0 if admitted else log.retry_after(now, self.window)

        if not admitted:
            seconds = max(1, math.ceil(retry_after))
            logger.debug(f"Rate limited client {key!r} on {request.method} {request.path}")
            return too_many_requests(retry_after=seconds, limit=self.limit)

        response = await self.downstream.handle(request)

        response.set_header("X-RateLimit-Limit", str(self.limit))
        response.set_header("X-RateLimit-Remaining", str(remaining))
        return response

    def _maybe_sweep(self, now: float) -> None:
        """
        Forget clients with no timestamps left in the window.

        Runs at most once per window, inline, with the lock held.
        """
        if now - self._last_sweep < self.window:
            return

        cutoff = now - self.window
        for key in list(self._windows):
            log = self._windows[key]
            log.prune(cutoff)
            if not log:
                del self._windows[key]

        self._last_sweep = now

    def usage(self, key: str) -> int:
        """Requests currently counted against ``key`` in the window."""
        with self._lock:
            log = self._windows.get(key)
            if log is None:
                return 0
            log.prune(self._clock() - self.window)
            return len(log)

    def reset(self, key: Optional[str] = None) -> None:
        """
        Reset rate limits for one client, or for all when ``key`` is None.

        Useful between test cases and for unblocking a client by hand.
        """
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)
