"""
=============================================================================
VALIDATION STAGE
=============================================================================

Rejects mutations that arrive without a payload.

    POST /api/users  body=None      → 400, nothing downstream runs
    POST /api/users  body={}        → 400
    POST /api/users  body={"a": 1}  → forwarded
    GET  /api/users  body=None      → forwarded (GET needs no body)

Which methods need a body is configurable; by default only POST does.

=============================================================================
"""

import logging
from typing import Iterable

from .base import Stage
from ..errors import ChainConfigurationError
from ..handlers.base import Handler
from ..http.request import HTTPMethod, Request
from ..http.response import Response, bad_request


logger = logging.getLogger(__name__)


class ValidationStage(Stage):
    """
    Body-presence validation.

    Args:
        downstream: Handler to forward valid requests to.
        body_required_methods: Methods that must carry a non-empty body.
    """

    def __init__(
        self,
        downstream: Handler,
        body_required_methods: Iterable[str] = ("POST",),
    ):
        super().__init__(downstream)
        try:
            self.body_required_methods = frozenset(
                HTTPMethod(str(method).upper()) for method in body_required_methods
            )
        except ValueError as e:
            raise ChainConfigurationError(f"Unknown method in body_required_methods: {e}") from e

    async def handle(self, request: Request) -> Response:
        if request.method in self.body_required_methods and not request.has_body:
            logger.debug(f"Rejected {request.method} {request.path}: missing body")
            return bad_request(f"{request.method} requests require a body")

        return await self.downstream.handle(request)
