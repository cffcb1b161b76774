"""
=============================================================================
CACHING STAGE
=============================================================================

Serves repeated (method, path) requests from memory for a fixed
time-to-live.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CACHE LOOKUP FLOW                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   key = "POST:/api/users"                                           │
    │        │                                                             │
    │        ▼                                                             │
    │   entry exists and age < ttl? ──yes──► return copy   (X-Cache: HIT) │
    │        │                              downstream is NOT called      │
    │        no                                                            │
    │        │                                                             │
    │        ▼                                                             │
    │   response = await downstream.handle(request)                       │
    │   store (copy of response, now)                      (X-Cache: MISS)│
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A hit short-circuits: everything downstream of this stage, including a
LoggingStage placed inside it, is skipped for that call.

The key is the method and path only. Two POSTs to the same path with
different bodies share one entry.

=============================================================================
STORED COPIES
=============================================================================

The cache keeps its own copy of each response and hands out copies on
every hit. Outer stages annotate the response they receive
(X-RateLimit-Remaining, ...), and those annotations must not leak into
the stored entry or into the next hit.

Headers that belong to one call only (X-Request-ID) are dropped from the
stored copy, so a hit never reports the id of the call that filled it.

=============================================================================
CONCURRENT MISSES
=============================================================================

The lock guards the table, not the downstream call. Two identical
requests that both miss before either has stored its response will
both be delegated; the later store wins. Expired entries are evicted
when their key is looked up, and an inline sweep drops the rest at most
once per ttl.

=============================================================================
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from .base import Stage
from ..errors import ChainConfigurationError
from ..handlers.base import Handler
from ..http.request import HTTPMethod, Request
from ..http.response import Response


logger = logging.getLogger(__name__)

# Headers describing a single call; never stored with a cached response.
PER_CALL_HEADERS = ("X-Request-ID",)


def cache_key(method: Union[str, HTTPMethod], path: str) -> str:
    """Cache key for a (method, path) pair, e.g. "POST:/api/users"."""
    return f"{str(method).upper()}:{path}"


@dataclass
class CacheEntry:
    """A stored response and the clock reading when it was stored."""

    response: Response
    created_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.created_at < ttl


class CacheStage(Stage):
    """
    In-memory response cache keyed by (method, path).

    Args:
        downstream: Handler to call on a miss.
        ttl: Seconds an entry stays fresh.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        downstream: Handler,
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(downstream)

        if ttl <= 0:
            raise ChainConfigurationError(f"ttl must be > 0, got {ttl}")

        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    async def handle(self, request: Request) -> Response:
        key = cache_key(request.method, request.path)

        cached = self._lookup(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached.set_header("X-Cache", "HIT")

        logger.debug(f"Cache miss: {key}")
        response = await self.downstream.handle(request)

        stored = response.copy()
        for header in PER_CALL_HEADERS:
            stored.headers.pop(header, None)

        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            self._entries[key] = CacheEntry(response=stored, created_at=now)

        return response.set_header("X-Cache", "MISS")

    def _lookup(self, key: str) -> Optional[Response]:
        """Copy of the fresh entry for ``key``; evicts it if stale."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(self._clock(), self.ttl):
                del self._entries[key]
                return None
            return entry.response.copy()

    def _maybe_sweep(self, now: float) -> None:
        """
        Evict every expired entry.

        Runs at most once per ttl, inline, with the lock held.
        """
        if now - self._last_sweep < self.ttl:
            return

        for key in [k for k, entry in self._entries.items() if not entry.is_fresh(now, self.ttl)]:
            del self._entries[key]

        self._last_sweep = now

    def invalidate(self, method: Union[str, HTTPMethod], path: str) -> bool:
        """Drop the entry for (method, path). Returns True if one existed."""
        with self._lock:
            return self._entries.pop(cache_key(method, path), None) is not None

    def reset(self, key: Optional[str] = None) -> None:
        """Clear one key ("GET:/x"), or the whole cache when ``key`` is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.is_fresh(self._clock(), self.ttl)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
