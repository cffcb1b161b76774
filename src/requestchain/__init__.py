"""
=============================================================================
REQUESTCHAIN - An Asynchronous Request-Handling Decorator Chain
=============================================================================

A pipeline of wrapper stages around a base handler. Each stage can
answer a request itself (short-circuit) or forward it to the one
handler it wraps, and can act before and after delegating.

    Validation → Authentication → RateLimit → Cache → Logging → Base

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    requestchain/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m requestchain)
    ├── chain.py             # Reference chain assembly
    ├── config.py            # ChainConfig dataclass
    ├── demo.py              # Printed demonstration scenarios
    ├── errors.py            # Construction-time exceptions
    ├── http/                # Request / Response model
    ├── handlers/            # Handler contract + terminal BaseHandler
    ├── stages/              # Validation, auth, rate limit, cache, logging
    └── patterns/            # Order state machine, vehicle factory, scope

=============================================================================
QUICK START
=============================================================================

    import asyncio
    from requestchain import build_chain, make_request

    chain = build_chain()

    response = asyncio.run(chain.handle(make_request(
        "POST", "/api/users",
        body={"name": "John"},
        authorization="Bearer token",
        client_id="client-1",
    )))

    response.status   # 200
    response.body     # {"method": "POST", "path": "/api/users", "data": {"name": "John"}}

=============================================================================
"""

__version__ = "1.0.0"

from .chain import build_chain, reference_builder
from .config import ChainConfig
from .errors import ChainError, ChainConfigurationError
from .handlers import BaseHandler, Handler
from .http import HTTPMethod, HTTPStatus, Request, Response, make_request
from .stages import ChainBuilder

__all__ = [
    "build_chain",
    "reference_builder",
    "ChainConfig",
    "ChainError",
    "ChainConfigurationError",
    "BaseHandler",
    "Handler",
    "HTTPMethod",
    "HTTPStatus",
    "Request",
    "Response",
    "make_request",
    "ChainBuilder",
    "__version__",
]
