"""
=============================================================================
STAGES
=============================================================================

The wrappers that make up the request chain. Each one holds exactly one
downstream handler and implements the same handle(request) contract.

    ┌──────────────────────┬─────────────────────────┬──────────────────┐
    │ Stage                │ Before delegating       │ After delegating │
    ├──────────────────────┼─────────────────────────┼──────────────────┤
    │ ValidationStage      │ POST needs a body → 400 │                  │
    │ AuthenticationStage  │ token present? → 401    │                  │
    │ RateLimitStage       │ < 5 in 60s? → 429       │ record timestamp │
    │ CacheStage           │ fresh entry? → return it│ store response   │
    │ LoggingStage         │ log START, start timer  │ log END, elapsed │
    └──────────────────────┴─────────────────────────┴──────────────────┘

Rejections are returned, never raised.

=============================================================================
"""

from .base import Stage, ChainBuilder, StageFactory, require_handler, iter_chain, describe_chain
from .validation import ValidationStage
from .auth import AuthenticationStage
from .rate_limit import RateLimitStage, SlidingWindow
from .cache import CacheStage, CacheEntry, cache_key
from .logging import LoggingStage, RequestLog

__all__ = [
    # Base classes
    "Stage",
    "ChainBuilder",
    "StageFactory",
    "require_handler",
    "iter_chain",
    "describe_chain",

    # Built-in stages
    "ValidationStage",
    "AuthenticationStage",
    "RateLimitStage",
    "SlidingWindow",
    "CacheStage",
    "CacheEntry",
    "cache_key",
    "LoggingStage",
    "RequestLog",
]
