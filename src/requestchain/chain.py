"""
=============================================================================
CHAIN ASSEMBLY
=============================================================================

Builds the reference pipeline:

    Validation(Authentication(RateLimit(Cache(Logging(Base)))))

    ┌─────────────────────────────────────────────────────────────────────┐
    │  ValidationStage                                                    │
    │  ┌───────────────────────────────────────────────────────────────┐  │
    │  │  AuthenticationStage                                          │  │
    │  │  ┌─────────────────────────────────────────────────────────┐  │  │
    │  │  │  RateLimitStage                                         │  │  │
    │  │  │  ┌───────────────────────────────────────────────────┐  │  │  │
    │  │  │  │  CacheStage                                       │  │  │  │
    │  │  │  │  ┌─────────────────────────────────────────────┐  │  │  │  │
    │  │  │  │  │  LoggingStage                               │  │  │  │  │
    │  │  │  │  │  ┌───────────────────────────────────────┐  │  │  │  │  │
    │  │  │  │  │  │            BaseHandler                │  │  │  │  │  │
    │  │  │  │  │  └───────────────────────────────────────┘  │  │  │  │  │
    │  │  │  │  └─────────────────────────────────────────────┘  │  │  │  │
    │  │  │  └───────────────────────────────────────────────────┘  │  │  │
    │  │  └─────────────────────────────────────────────────────────┘  │  │
    │  └───────────────────────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────────────────────┘

Consequences of this order:
- Invalid and unauthenticated requests never count against the rate limit.
- Cache hits still count against the rate limit (the limiter is outside).
- Cache hits are never logged (the logger is inside).

Callers wanting a different order use ChainBuilder directly.

=============================================================================
"""

import logging
import time
from typing import Callable, Optional

from .config import ChainConfig
from .handlers import BaseHandler, Handler
from .stages import (
    AuthenticationStage,
    CacheStage,
    ChainBuilder,
    LoggingStage,
    RateLimitStage,
    ValidationStage,
    describe_chain,
)


logger = logging.getLogger(__name__)


def reference_builder(
    config: ChainConfig,
    clock: Callable[[], float] = time.monotonic,
    timer: Callable[[], float] = time.perf_counter,
) -> ChainBuilder:
    """
    ChainBuilder preloaded with the five reference stages, outermost first.

    Args:
        config: Settings for every stage.
        clock: Time source shared by the rate limiter and the cache.
        timer: Elapsed-time source for the logging stage.
    """
    return ChainBuilder().use(
        lambda inner: ValidationStage(inner, body_required_methods=config.body_required_methods),
        AuthenticationStage,
        lambda inner: RateLimitStage(
            inner, limit=config.rate_limit, window=config.rate_window, clock=clock,
        ),
        lambda inner: CacheStage(inner, ttl=config.cache_ttl, clock=clock),
        lambda inner: LoggingStage(
            inner,
            log_format=config.log_format,
            include_request_id=config.include_request_id,
            timer=timer,
        ),
    )


def build_chain(
    config: Optional[ChainConfig] = None,
    handler: Optional[Handler] = None,
    clock: Callable[[], float] = time.monotonic,
    timer: Callable[[], float] = time.perf_counter,
) -> Handler:
    """
    Build the reference chain and return its entry point.

    Args:
        config: Settings; defaults to ChainConfig().
        handler: Terminal handler; defaults to BaseHandler(config.handler_delay).
        clock: Time source for the rate-limit window and cache age.
        timer: Elapsed-time source for the logging stage.

    Raises:
        ChainConfigurationError: if the config or any stage is invalid.

    Example:
        chain = build_chain()
        response = await chain.handle(make_request(
            "POST", "/api/users", body={"name": "John"},
            authorization="Bearer token", client_id="client-1",
        ))
    """
    config = config or ChainConfig()
    config.validate()

    if handler is None:
        handler = BaseHandler(delay=config.handler_delay)

    entry = reference_builder(config, clock=clock, timer=timer).wrap(handler)
    logger.debug(f"Built chain: {describe_chain(entry)}")
    return entry
