"""
=============================================================================
BASE STAGE INTERFACE
=============================================================================

Defines the stage contract and the builder that nests stages into a
chain. Implements the Decorator design pattern.

=============================================================================
DECORATOR PATTERN
=============================================================================

Each stage WRAPS exactly one downstream handler and exposes the same
interface as the thing it wraps. A caller holding the outermost stage
cannot tell how many layers sit underneath it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 DECORATOR CHAIN - REQUEST FLOW                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request ────────────────────────────────────────────────►         │
    │                                                                      │
    │   ┌──────────┐  ┌──────────┐  ┌──────────┐  ┌────────┐  ┌───────┐  │
    │   │Validation│─►│   Auth   │─►│   Rate   │─►│ Cache  │─►│Logging│─►│ Base
    │   └────┬─────┘  └────┬─────┘  └────┬─────┘  └───┬────┘  └───┬───┘  │
    │        │             │             │            │           │       │
    │        ▼             ▼             ▼            ▼           ▼       │
    │   [before]      [before]      [before]     [before]    [before]    │
    │   body on       token         count in     fresh hit?  start       │
    │   POST?         present?      window < 5?  → return    timer       │
    │   → 400         → 401         → 429                                 │
    │                                                                      │
    │                               [after]      [after]     [after]     │
    │                               record       store       log         │
    │                               timestamp    response    elapsed     │
    │                                                                      │
    │   ◄──────────────────────────────────────────────── Response        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE RULES EVERY STAGE FOLLOWS
=============================================================================

1. A stage is bound to ONE downstream handler when it is constructed,
   and that binding never changes.
2. A stage either answers the request itself (short-circuit) or awaits
   its downstream handler exactly once. Never twice, never a handler
   further down.
3. A stage that rejects a request does not delegate at all, so nothing
   downstream observes a rejected request.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional
import logging

from ..errors import ChainConfigurationError
from ..handlers.base import Handler
from ..http.request import Request
from ..http.response import Response


logger = logging.getLogger(__name__)


def require_handler(downstream: object, owner: str = "stage") -> Handler:
    """
    Check that ``downstream`` can be delegated to.

    Raises:
        ChainConfigurationError: if it is None or has no callable handle().
    """
    if downstream is None:
        raise ChainConfigurationError(f"{owner} requires a downstream handler, got None")
    if not callable(getattr(downstream, "handle", None)):
        raise ChainConfigurationError(
            f"{owner} downstream {downstream!r} does not implement handle(request)"
        )
    return downstream


class Stage(ABC):
    """
    Abstract base class for chain stages.

    =========================================================================
    STAGE ANATOMY
    =========================================================================

        class MyStage(Stage):
            async def handle(self, request: Request) -> Response:
                # PRE-CHECK: reject without delegating
                if not self.is_acceptable(request):
                    return bad_request("...")        # Short-circuit!

                # DELEGATE: exactly once
                response = await self.downstream.handle(request)

                # POST-PROCESS
                response.set_header("X-Processed-By", self.name)
                return response

    =========================================================================
    """

    def __init__(self, downstream: Handler):
        self._downstream = require_handler(downstream, owner=self.__class__.__name__)

    @property
    def downstream(self) -> Handler:
        """The handler this stage delegates to. Fixed at construction."""
        return self._downstream

    @abstractmethod
    async def handle(self, request: Request) -> Response:
        """
        Process the request.

        Returns:
            Either a response synthesized by this stage (short-circuit)
            or the response of ``await self.downstream.handle(request)``.
        """

    @property
    def name(self) -> str:
        """Get the stage name for logging."""
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.name}({self._downstream!r})"


StageFactory = Callable[[Handler], Stage]


class ChainBuilder:
    """
    Nests stages around a terminal handler.

    =========================================================================
    BUILD ORDER
    =========================================================================

    Stages are listed OUTERMOST FIRST, the order a request meets them:

        builder = (ChainBuilder()
            .add(ValidationStage)
            .add(AuthenticationStage)
            .add(lambda h: RateLimitStage(h, limit=5)))

        chain = builder.wrap(BaseHandler())

    wrap() then constructs them innermost first:

        Step 1: current = BaseHandler()
        Step 2: current = RateLimitStage(current)
        Step 3: current = AuthenticationStage(current)
        Step 4: current = ValidationStage(current)     ← entry point

    Each factory receives the already-built inner handler, so every
    stage is born bound to its neighbour and the order cannot change
    afterwards.

    =========================================================================
    """

    def __init__(self):
        self._factories: List[StageFactory] = []

    def add(self, factory: StageFactory) -> "ChainBuilder":
        """
        Append a stage factory (a Stage subclass or any callable taking
        the downstream handler and returning a Stage).

        Returns:
            Self for method chaining
        """
        if not callable(factory):
            raise ChainConfigurationError(f"Stage factory {factory!r} is not callable")
        self._factories.append(factory)
        return self

    def use(self, *factories: StageFactory) -> "ChainBuilder":
        """Add several stage factories at once, outermost first."""
        for factory in factories:
            self.add(factory)
        return self

    def wrap(self, handler: Handler) -> Handler:
        """
        Build the chain around ``handler`` and return its entry point.

        With no stages added, the handler itself is returned.
        """
        current = require_handler(handler, owner="ChainBuilder")

        # reversed([A, B, C]) = [C, B, A]  →  A(B(C(handler)))
        for factory in reversed(self._factories):
            current = factory(current)
            require_handler(current, owner=f"stage factory {factory!r}")
            logger.debug(f"Wrapped stage: {getattr(current, 'name', type(current).__name__)}")

        return current

    def __len__(self) -> int:
        return len(self._factories)


def iter_chain(entry: Handler) -> Iterator[Handler]:
    """Walk a chain from its entry point down to the terminal handler."""
    current: Optional[Handler] = entry
    while current is not None:
        yield current
        current = getattr(current, "downstream", None)


def describe_chain(entry: Handler) -> str:
    """
    Human-readable chain layout, e.g.
    "ValidationStage → AuthenticationStage → ... → BaseHandler".
    """
    return " → ".join(
        getattr(link, "name", type(link).__name__) for link in iter_chain(entry)
    )
