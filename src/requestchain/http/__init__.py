"""
=============================================================================
REQUEST / RESPONSE MODEL
=============================================================================

The in-process call contract every stage implements:

    handle(Request{method, path, body?, headers?}) -> Response{status, body}

There is no wire format. Requests and responses are plain objects that
live only for the duration of one call.

=============================================================================
"""

from .request import Request, HTTPMethod, make_request, is_empty_payload, CLIENT_ID_HEADER
from .response import (
    Response,
    ResponseBuilder,
    ok,
    bad_request,
    unauthorized,
    too_many_requests,
)
from .status_codes import HTTPStatus

__all__ = [
    # Requests
    "Request",
    "HTTPMethod",
    "make_request",
    "is_empty_payload",
    "CLIENT_ID_HEADER",

    # Responses
    "Response",
    "ResponseBuilder",
    "ok",
    "bad_request",
    "unauthorized",
    "too_many_requests",

    # Status codes
    "HTTPStatus",
]
