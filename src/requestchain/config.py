"""
=============================================================================
CHAIN CONFIGURATION
=============================================================================

Centralized configuration for the request chain.

Every tunable the stages read lives in ChainConfig: the rate-limit cap
and window, the cache time-to-live, which methods must carry a body,
the simulated handler latency, and logging.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m requestchain --delay 0.05                       │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── CHAIN_RATE_LIMIT=10 python -m requestchain                │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAIL FAST
=============================================================================

validate() runs when the chain is built, not when the first request
arrives. A window of zero seconds or a negative cap is a programming
error and raises ChainConfigurationError immediately.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Tuple

from .errors import ChainConfigurationError


LOG_FORMATS = ("text", "json")


@dataclass
class ChainConfig:
    """
    Configuration for the request chain.

    Defaults reproduce the reference pipeline: 5 requests per client per
    60 seconds, a 60 second cache, and a body required on POST.

    Example:
        config = ChainConfig(rate_limit=10, cache_ttl=5.0)
        chain = build_chain(config)
    """

    # ─────────────────────────────────────────────────────────────────────
    # RATE LIMITING
    # ─────────────────────────────────────────────────────────────────────

    rate_limit: int = 5
    """Requests admitted per client inside one sliding window."""

    rate_window: float = 60.0
    """Length of the sliding window in seconds."""

    # ─────────────────────────────────────────────────────────────────────
    # CACHING
    # ─────────────────────────────────────────────────────────────────────

    cache_ttl: float = 60.0
    """Seconds a cached response stays fresh."""

    # ─────────────────────────────────────────────────────────────────────
    # VALIDATION
    # ─────────────────────────────────────────────────────────────────────

    body_required_methods: Tuple[str, ...] = ("POST",)
    """Methods rejected with 400 when they arrive without a body."""

    # ─────────────────────────────────────────────────────────────────────
    # BASE HANDLER
    # ─────────────────────────────────────────────────────────────────────

    handler_delay: float = 0.0
    """Simulated I/O latency of the base handler, in seconds."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR).
    DEBUG also shows every rejection and cache hit/miss.
    """

    log_format: str = "text"
    """Access log format: 'text' (one line per record) or 'json'."""

    include_request_id: bool = True
    """Add X-Request-ID to responses that pass through LoggingStage."""

    @classmethod
    def from_env(cls) -> "ChainConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        CHAIN_RATE_LIMIT     Requests per window (default: 5)
        CHAIN_RATE_WINDOW    Window length in seconds (default: 60)
        CHAIN_CACHE_TTL      Cache time-to-live in seconds (default: 60)
        CHAIN_HANDLER_DELAY  Simulated handler latency (default: 0)
        CHAIN_LOG_LEVEL      Logging level (default: INFO)
        CHAIN_LOG_FORMAT     text or json (default: text)

        =====================================================================
        """
        try:
            return cls(
                rate_limit=int(os.getenv("CHAIN_RATE_LIMIT", "5")),
                rate_window=float(os.getenv("CHAIN_RATE_WINDOW", "60")),
                cache_ttl=float(os.getenv("CHAIN_CACHE_TTL", "60")),
                handler_delay=float(os.getenv("CHAIN_HANDLER_DELAY", "0")),
                log_level=os.getenv("CHAIN_LOG_LEVEL", "INFO"),
                log_format=os.getenv("CHAIN_LOG_FORMAT", "text"),
            )
        except ValueError as e:
            raise ChainConfigurationError(f"Invalid CHAIN_* environment value: {e}") from e

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ChainConfigurationError: on the first invalid value.
        """
        if self.rate_limit < 1:
            raise ChainConfigurationError(f"rate_limit must be >= 1, got {self.rate_limit}")

        if self.rate_window <= 0:
            raise ChainConfigurationError(f"rate_window must be > 0, got {self.rate_window}")

        if self.cache_ttl <= 0:
            raise ChainConfigurationError(f"cache_ttl must be > 0, got {self.cache_ttl}")

        if self.handler_delay < 0:
            raise ChainConfigurationError(f"handler_delay must be >= 0, got {self.handler_delay}")

        if self.log_format not in LOG_FORMATS:
            raise ChainConfigurationError(
                f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}"
            )

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ChainConfigurationError(f"Unknown log_level: {self.log_level!r}")


DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """
    Configure root logging for the command-line entry point.

    Args:
        level: Level name for the root and "requestchain" loggers.
        fmt: logging.Formatter format string for every record.
    """
    numeric = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric,
        format=fmt,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("requestchain").setLevel(numeric)
