"""
pytest configuration and fixtures.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from requestchain import ChainConfig, build_chain
from requestchain.handlers import BaseHandler
from requestchain.http import Request, Response, make_request


class FakeClock:
    """Manually advanced time source for the rate limiter and cache."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyHandler:
    """Terminal handler that records every request it receives."""

    def __init__(self, delay: float = 0.0):
        self.requests: List[Request] = []
        self._inner = BaseHandler(delay=delay)

    async def handle(self, request: Request) -> Response:
        self.requests.append(request)
        return await self._inner.handle(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def name(self) -> str:
        return "SpyHandler"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def spy() -> SpyHandler:
    return SpyHandler()


@pytest.fixture
def chain(clock: FakeClock, spy: SpyHandler):
    """Reference chain around a spy, driven by the fake clock."""
    return build_chain(ChainConfig(), handler=spy, clock=clock)


@pytest.fixture
def user_request() -> Request:
    """Valid POST /api/users from client-1."""
    return make_request(
        "POST", "/api/users",
        body={"name": "John"},
        authorization="Bearer token",
        client_id="client-1",
    )
