"""
=============================================================================
REQUEST MODEL
=============================================================================

The request object that travels down the chain.

A Request is built fresh for every call and is never persisted. Stages
read it; none of them mutate it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST ANATOMY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request(                                                           │
    │       method=HTTPMethod.POST,        ◄── ValidationStage, cache key │
    │       path="/api/users",             ◄── cache key                  │
    │       body={"name": "John"},         ◄── ValidationStage, echo      │
    │       headers={                                                      │
    │           "authorization": "Bearer t",  ◄── AuthenticationStage     │
    │           "x-client-id": "client-1",    ◄── RateLimitStage          │
    │       },                                                             │
    │   )                                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Header names are case-insensitive, so they are normalized to lowercase
once at construction instead of calling .lower() in every stage.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class HTTPMethod(str, Enum):
    """
    Request verbs understood by the chain.

    A str Enum, so HTTPMethod.POST == "POST" and it formats as the bare verb
    in log lines and cache keys.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value


# Header carrying the caller's identity for rate limiting. "clientid" is
# accepted as an alias for callers that send the bare field name.
CLIENT_ID_HEADER = "x-client-id"
_CLIENT_ID_ALIASES = (CLIENT_ID_HEADER, "clientid", "client-id")


def is_empty_payload(body: Any) -> bool:
    """
    Check whether a request body counts as "missing".

    None, an empty string/bytes and an empty container are all missing.
    Scalars such as 0 or False are real payloads.
    """
    if body is None:
        return True
    if isinstance(body, (str, bytes, bytearray, dict, list, tuple, set)):
        return len(body) == 0
    return False


@dataclass
class Request:
    """
    A single call into the chain.

    Attributes:
        method:  The verb. Plain strings are accepted and converted to
                 HTTPMethod ("post" → HTTPMethod.POST).
        path:    Resource path, e.g. "/api/users".
        body:    Opaque payload. The chain only checks whether it is empty.
        headers: Header map with lowercase keys.
    """

    method: HTTPMethod
    path: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.method, HTTPMethod):
            try:
                self.method = HTTPMethod(str(self.method).upper())
            except ValueError:
                raise ValueError(f"Unsupported HTTP method: {self.method!r}") from None
        self.headers = {name.lower(): value for name, value in (self.headers or {}).items()}

    @property
    def authorization(self) -> Optional[str]:
        """The Authorization header, or None when absent or blank."""
        value = self.headers.get("authorization")
        return value or None

    @property
    def client_id(self) -> Optional[str]:
        """The client identifier used for rate limiting, or None."""
        for name in _CLIENT_ID_ALIASES:
            value = self.headers.get(name)
            if value:
                return value
        return None

    @property
    def has_body(self) -> bool:
        return not is_empty_payload(self.body)

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            token = request.get_header("Authorization")
        """
        return self.headers.get(name.lower(), default)


def make_request(
    method: Union[str, HTTPMethod],
    path: str,
    body: Any = None,
    authorization: Optional[str] = None,
    client_id: Optional[str] = None,
) -> Request:
    """
    Build a Request from the two headers the chain cares about.

    Headers that are None are left out entirely, so
    make_request("GET", "/x") produces a request with no credentials.
    """
    headers: Dict[str, str] = {}
    if authorization is not None:
        headers["authorization"] = authorization
    if client_id is not None:
        headers[CLIENT_ID_HEADER] = client_id
    return Request(method=method, path=path, body=body, headers=headers)
