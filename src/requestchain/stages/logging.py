"""
=============================================================================
LOGGING STAGE
=============================================================================

Times the delegated call and emits one START and one END record per
request that reaches it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   [a1b2c3d4] START POST /api/users client=client-1                  │
    │   [a1b2c3d4] END   POST /api/users client=client-1 200 3.12ms       │
    └─────────────────────────────────────────────────────────────────────┘

In the reference chain this stage sits INSIDE the cache, so it only
sees cache misses: a hit is answered before the request gets here and
produces no records at all. Rejections by the outer stages (400, 401,
429) are likewise never logged here.

=============================================================================
LOG FORMATS
=============================================================================

    text (default):  [a1b2c3d4] END POST /api/users client=client-1 200 3.12ms
    json:            {"request_id": "a1b2c3d4", "event": "end", ...}

JSON lines are meant for log aggregators; text lines for people.

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from .base import Stage
from ..config import LOG_FORMATS
from ..errors import ChainConfigurationError
from ..handlers.base import Handler
from ..http.request import Request
from ..http.response import Response


# Dedicated access logger, configurable on its own:
#   logging.getLogger("requestchain.access").setLevel(logging.WARNING)
logger = logging.getLogger("requestchain.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one side of a delegated call.

    ``status_code`` and ``duration_ms`` are only known at the end, so
    they are None on START records.
    """

    request_id: str
    event: str
    method: str
    path: str
    client_id: str
    timestamp: str
    status_code: Optional[int] = None
    duration_ms: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "request_id": self.request_id,
            "event": self.event,
            "method": self.method,
            "path": self.path,
            "client_id": self.client_id,
            "timestamp": self.timestamp,
        }
        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.duration_ms is not None:
            data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        line = (
            f"[{self.request_id}] {self.event.upper():<5} "
            f"{self.method} {self.path} client={self.client_id}"
        )
        if self.status_code is not None:
            line += f" {self.status_code}"
        if self.duration_ms is not None:
            line += f" {self.duration_ms:.2f}ms"
        return line


class LoggingStage(Stage):
    """
    Request timing and access logging.

    Args:
        downstream: Handler whose call is timed.
        log_format: "text" or "json".
        include_request_id: Add X-Request-ID to the response.
        log_level: Level for START/END records.
        timer: Elapsed-time source in seconds, injectable for tests.
    """

    def __init__(
        self,
        downstream: Handler,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        timer: Callable[[], float] = time.perf_counter,
    ):
        super().__init__(downstream)

        if log_format not in LOG_FORMATS:
            raise ChainConfigurationError(
                f"log_format must be one of {LOG_FORMATS}, got {log_format!r}"
            )

        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self._timer = timer

    async def handle(self, request: Request) -> Response:
        # 8 hex chars is plenty to correlate the two lines of one call.
        request_id = uuid.uuid4().hex[:8]

        self._emit(self._entry(request_id, "start", request))
        start = self._timer()

        try:
            response = await self.downstream.handle(request)
        except Exception as e:
            duration_ms = (self._timer() - start) * 1000
            logger.error(
                f"[{request_id}] FAIL  {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (self._timer() - start) * 1000
        self._emit(self._entry(
            request_id, "end", request,
            status_code=int(response.status),
            duration_ms=duration_ms,
        ))

        if self.include_request_id:
            response.set_header("X-Request-ID", request_id)

        return response

    def _entry(self, request_id: str, event: str, request: Request, **fields) -> RequestLog:
        return RequestLog(
            request_id=request_id,
            event=event,
            method=str(request.method),
            path=request.path,
            client_id=request.client_id or "-",
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            **fields,
        )

    def _emit(self, entry: RequestLog) -> None:
        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
