"""
=============================================================================
HANDLERS
=============================================================================

The handler contract shared by every link of the chain, and the terminal
handler that sits at the end of it.

    Handler          Protocol: async handle(request) -> Response
    BaseHandler      Terminal handler, echoes the request back
    FunctionHandler  Adapts a coroutine function to the Handler contract

=============================================================================
"""

from .base import Handler, HandlerFunc, FunctionHandler, function_handler
from .echo import BaseHandler

__all__ = [
    "Handler",
    "HandlerFunc",
    "FunctionHandler",
    "function_handler",
    "BaseHandler",
]
