"""
=============================================================================
BASE HANDLER
=============================================================================

The terminal node of the chain. It answers every request that gets past
the stages and never delegates further.

The answer is a pure function of the request:

    POST /api/users  body={"name": "John"}
        │
        ▼
    200 {"method": "POST", "path": "/api/users", "data": {"name": "John"}}

The optional delay simulates downstream I/O (a database call, a remote
service) so the cooperative suspension at each stage's delegation point
can be observed. Apart from that and a log line, handling a request has
no side effects.

=============================================================================
"""

import asyncio
import logging

from ..errors import ChainConfigurationError
from ..http.request import Request
from ..http.response import Response, ok


logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Echoing terminal handler.

    Args:
        delay: Seconds to suspend before answering (simulated latency).
    """

    def __init__(self, delay: float = 0.0):
        if delay < 0:
            raise ChainConfigurationError(f"delay must be >= 0, got {delay}")
        self.delay = delay

    async def handle(self, request: Request) -> Response:
        logger.debug(f"Handling {request.method} {request.path}")

        if self.delay:
            await asyncio.sleep(self.delay)

        return ok({
            "method": str(request.method),
            "path": request.path,
            "data": request.body,
        })

    @property
    def name(self) -> str:
        return self.__class__.__name__
