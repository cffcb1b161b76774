"""
=============================================================================
PROCESS-SCOPED STATE
=============================================================================

Replaces global singleton holders with an explicit object.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   scope = ProcessScope()                  # created once, in main() │
    │                                                                      │
    │   chain = scope.get_or_create("chain", build_chain)                 │
    │   again = scope.get_or_create("chain", build_chain)                 │
    │   assert chain is again                   # initialised once        │
    │                                                                      │
    │   scope.reset()                           # tests start clean       │
    └─────────────────────────────────────────────────────────────────────┘

Code that needs shared state receives the scope as an argument instead
of reaching for a module-level instance, so a test can hand in a fresh
scope and nothing leaks between tests.

=============================================================================
"""

import logging
import threading
from typing import Any, Callable, Dict, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProcessScope:
    """Named, initialise-once values shared within one process."""

    def __init__(self):
        self._values: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def get_or_create(self, key: str, factory: Callable[[], T]) -> T:
        """
        Return the value for ``key``, calling ``factory`` the first time.

        The factory runs at most once per key, even with concurrent
        callers. If it raises, nothing is stored and the next call retries.
        """
        with self._lock:
            if key not in self._values:
                logger.debug(f"Initialising scoped value {key!r}")
                self._values[key] = factory()
            return self._values[key]

    def get(self, key: str) -> Any:
        """
        Raises:
            KeyError: if ``key`` was never initialised.
        """
        with self._lock:
            return self._values[key]

    def reset(self) -> None:
        """Forget every value. Intended for tests."""
        with self._lock:
            self._values.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
