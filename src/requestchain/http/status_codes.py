"""
=============================================================================
STATUS CODES PRODUCED BY THE CHAIN
=============================================================================

Every response that leaves the chain carries one of these codes.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  2xx   │ SUCCESS: the base handler (or the cache) answered         │
    │        │                                                           │
    │        │ 200 OK            - Echo of the request                   │
    │        │ 201 Created       - Resource created                      │
    │        │ 204 No Content    - Success with no body                  │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ CLIENT ERROR: a stage short-circuited the request         │
    │        │                                                           │
    │        │ 400 Bad Request       - ValidationStage (missing body)    │
    │        │ 401 Unauthorized      - AuthenticationStage (no token)    │
    │        │ 404 Not Found         - Unknown resource                  │
    │        │ 429 Too Many Requests - RateLimitStage (quota used up)    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ SERVER ERROR                                              │
    │        │                                                           │
    │        │ 500 Internal Error    - Unexpected handler failure        │
    └────────┴───────────────────────────────────────────────────────────┘

The three 4xx rejections are ordinary return values. No stage raises to
report them.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the request chain.

    IntEnum, so a status compares equal to its integer:

        >>> HTTPStatus.TOO_MANY_REQUESTS == 429
        True
        >>> HTTPStatus.TOO_MANY_REQUESTS.phrase
        'Too Many Requests'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    NO_CONTENT = 204

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400           # Missing body on a mutation
    UNAUTHORIZED = 401          # Missing credential
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429     # Rate limited

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase for this status code (e.g. "Bad Request")."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        """Check if this is a 4xx (client error) status code."""
        return 400 <= self < 500

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
