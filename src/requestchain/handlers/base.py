"""
=============================================================================
THE HANDLER CONTRACT
=============================================================================

Everything in the chain, stages and the terminal handler alike, speaks
one contract:

    async def handle(request: Request) -> Response

A stage holds exactly one object satisfying this contract (its
downstream handler) and never needs to know whether that object is
another stage or the terminal handler. That is what lets the chain be
composed by nesting:

    ValidationStage(AuthenticationStage(... (BaseHandler())))

=============================================================================
"""

import inspect
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from ..http.request import Request
from ..http.response import Response


@runtime_checkable
class Handler(Protocol):
    """Anything with an ``async handle(request) -> Response`` method."""

    async def handle(self, request: Request) -> Response:
        ...


HandlerFunc = Callable[[Request], Awaitable[Response]]


class FunctionHandler:
    """
    Wraps a coroutine function as a Handler.

    Useful for one-off terminal handlers without writing a class.

    Usage:
        async def hello(request):
            return ok({"hello": request.path})

        chain = build_chain(handler=FunctionHandler(hello))
    """

    def __init__(self, func: HandlerFunc, name: Optional[str] = None):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"{func!r} is not a coroutine function")
        self._func = func
        self._name = name or func.__name__

    async def handle(self, request: Request) -> Response:
        return await self._func(request)

    @property
    def name(self) -> str:
        return self._name


def function_handler(func: HandlerFunc) -> FunctionHandler:
    """
    Decorator to create a handler from a coroutine function.

        @function_handler
        async def echo(request):
            return ok(request.body)
    """
    return FunctionHandler(func)
