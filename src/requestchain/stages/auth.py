"""
=============================================================================
AUTHENTICATION STAGE
=============================================================================

Rejects requests that carry no credential.

Only the PRESENCE of the Authorization header is checked. Verifying the
token (signatures, expiry, user lookup) is out of scope: the point of
this stage is where it sits in the chain, not what it verifies.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   authorization: "Bearer abc"   → forwarded                        │
    │   authorization: ""             → 401                               │
    │   (no header)                   → 401                               │
    └─────────────────────────────────────────────────────────────────────┘

A 401 returned here means the rate limiter, the cache and the logging
stage never see the request at all.

=============================================================================
"""

import logging

from .base import Stage
from ..http.request import Request
from ..http.response import Response, unauthorized


logger = logging.getLogger(__name__)


class AuthenticationStage(Stage):
    """Requires a non-empty Authorization header."""

    async def handle(self, request: Request) -> Response:
        if request.authorization is None:
            logger.debug(f"Rejected {request.method} {request.path}: missing authorization")
            return unauthorized("Missing authorization header")

        return await self.downstream.handle(request)
