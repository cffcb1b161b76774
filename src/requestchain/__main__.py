"""
=============================================================================
COMMAND-LINE ENTRY POINT
=============================================================================

    # Run every demonstration
    python -m requestchain

    # Only the request chain, with 50ms of simulated handler latency
    python -m requestchain --scenario chain --delay 0.05

    # See every rejection and cache hit/miss
    python -m requestchain --log-level DEBUG

    # Access log as JSON lines
    python -m requestchain --log-format json

Settings not given on the command line come from CHAIN_* environment
variables (see ChainConfig.from_env), then from the defaults.

=============================================================================
"""

import argparse
import asyncio
import dataclasses
import sys

from . import __version__
from .chain import build_chain
from .config import ChainConfig, LOG_FORMATS, configure_logging
from .demo import run_chain_scenario, run_factory_scenario, run_order_scenario
from .errors import ChainConfigurationError
from .patterns import OrderService, ProcessScope


SCENARIOS = ("chain", "orders", "factory", "all")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="requestchain",
        description="Request-handling decorator chain and design-pattern demonstrations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m requestchain                         # Run every scenario
  python -m requestchain --scenario chain        # Only the request chain
  python -m requestchain --delay 0.05            # Simulated handler latency
  python -m requestchain --log-format json       # JSON access log
        """
    )

    parser.add_argument(
        "--scenario",
        choices=SCENARIOS,
        default="all",
        help="Which demonstration to run (default: all)"
    )

    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=None,
        help="Simulated base handler latency in seconds (default: 0)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"requestchain {__version__}"
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # =========================================================================
    # CONFIGURATION: CLI > environment > defaults
    # =========================================================================

    overrides = {
        "handler_delay": args.delay,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }

    try:
        config = ChainConfig.from_env()
        config = dataclasses.replace(
            config, **{k: v for k, v in overrides.items() if v is not None}
        )
        config.validate()
    except ChainConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)

    # One scope for the whole run; scenarios get what they need from it.
    scope = ProcessScope()
    scope.get_or_create("config", lambda: config)

    if args.scenario in ("chain", "all"):
        chain = scope.get_or_create("chain", lambda: build_chain(scope.get("config")))
        asyncio.run(run_chain_scenario(chain))

    if args.scenario in ("orders", "all"):
        run_order_scenario(scope.get_or_create("orders", OrderService))

    if args.scenario in ("factory", "all"):
        run_factory_scenario()

    return 0


if __name__ == "__main__":
    sys.exit(main())
