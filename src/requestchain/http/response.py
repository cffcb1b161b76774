"""
=============================================================================
RESPONSE MODEL
=============================================================================

The value that flows back UP the chain.

Every stage returns a Response: the base handler builds the first one,
and each stage on the way out may annotate its headers. A stage that
short-circuits builds its own Response and the stages inside it never
see the request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    RESPONSE ON THE WAY OUT                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   BaseHandler      Response(200, body={...})                        │
    │        │                                                             │
    │        ▼                                                             │
    │   LoggingStage     + X-Request-ID                                   │
    │        │                                                             │
    │        ▼                                                             │
    │   CacheStage       + X-Cache: MISS    (stores a copy)               │
    │        │                                                             │
    │        ▼                                                             │
    │   RateLimitStage   + X-RateLimit-Limit / X-RateLimit-Remaining      │
    │        │                                                             │
    │        ▼                                                             │
    │   caller                                                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .status_codes import HTTPStatus


@dataclass
class Response:
    """
    Result of handling a Request.

    Attributes:
        status:  Status code (HTTPStatus, compares equal to plain ints).
        body:    Opaque payload, usually a dict.
        headers: Annotations added by stages (X-Cache, Retry-After, ...).
    """

    status: HTTPStatus = HTTPStatus.OK
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= int(self.status) < 300

    def set_header(self, name: str, value: str) -> "Response":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("X-Cache", "HIT").set_header("X-Other", "1")
        """
        self.headers[name] = value
        return self

    def copy(self) -> "Response":
        """
        Independent copy of this response.

        The body is deep-copied so a caller mutating a copy can never
        reach back into a stored original (see CacheStage).
        """
        return Response(
            status=self.status,
            body=copy.deepcopy(self.body),
            headers=dict(self.headers),
        )


class ResponseBuilder:
    """
    Fluent builder for constructing responses.

    Each method returns `self`, enabling chaining:

        response = (ResponseBuilder()
            .status(HTTPStatus.TOO_MANY_REQUESTS)
            .header("Retry-After", "12")
            .json({"error": "Too Many Requests"})
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Any = None

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """Set a structured body and mark it as JSON."""
        self._body = data
        self._headers["Content-Type"] = "application/json"
        return self

    def build(self) -> Response:
        return Response(
            status=self._status,
            body=self._body,
            headers=dict(self._headers),
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================
#
# Shortcuts for the responses stages synthesize when they short-circuit.
# Error bodies always have the same shape:
#
#     {"error": "<reason phrase>", "message": "<what went wrong>"}
#
# =============================================================================

def _error(status: HTTPStatus, message: Optional[str]) -> ResponseBuilder:
    return (ResponseBuilder()
        .status(status)
        .json({"error": status.phrase, "message": message or status.phrase}))


def ok(body: Any = None) -> Response:
    """Create a 200 OK response."""
    return ResponseBuilder().status(HTTPStatus.OK).json(body).build()


def bad_request(message: str = "Bad Request") -> Response:
    """
    Create a 400 Bad Request response.

    Used by ValidationStage when a mutation arrives without a body.
    """
    return _error(HTTPStatus.BAD_REQUEST, message).build()


def unauthorized(message: str = "Unauthorized") -> Response:
    """
    Create a 401 Unauthorized response.

    Despite the name, 401 means "not authenticated" (identity unknown).
    Includes WWW-Authenticate to indicate the expected scheme.
    """
    return (_error(HTTPStatus.UNAUTHORIZED, message)
        .header("WWW-Authenticate", 'Bearer realm="api"')
        .build())


def too_many_requests(retry_after: int, limit: int, message: Optional[str] = None) -> Response:
    """
    Create a 429 Too Many Requests response.

    Args:
        retry_after: Whole seconds until the client may try again.
        limit: The per-window request cap, echoed in X-RateLimit-Limit.
    """
    message = message or f"Rate limit exceeded. Try again in {retry_after} seconds."
    response = (_error(HTTPStatus.TOO_MANY_REQUESTS, message)
        .header("Retry-After", str(retry_after))
        .header("X-RateLimit-Limit", str(limit))
        .header("X-RateLimit-Remaining", "0")
        .build())
    response.body["retry_after"] = retry_after
    return response

