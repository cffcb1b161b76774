"""
Unit tests for the response cache stage.
"""

import pytest

from requestchain.errors import ChainConfigurationError
from requestchain.http import make_request
from requestchain.stages import CacheStage, LoggingStage, cache_key


class TestCacheKey:

    def test_format(self):
        assert cache_key("POST", "/api/users") == "POST:/api/users"
        assert cache_key("get", "/x") == "GET:/x"


class TestCacheStage:
    """Tests for CacheStage."""

    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        request = make_request("GET", "/api/users")

        first = await stage.handle(request)
        second = await stage.handle(request)

        assert spy.calls == 1
        assert first.headers["X-Cache"] == "MISS"
        assert second.headers["X-Cache"] == "HIT"
        assert second.status == first.status
        assert second.body == first.body

    @pytest.mark.asyncio
    async def test_key_ignores_body(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)

        await stage.handle(make_request("POST", "/api/users", body={"name": "John"}))
        second = await stage.handle(make_request("POST", "/api/users", body={"name": "Jane"}))

        assert spy.calls == 1
        assert second.body["data"] == {"name": "John"}

    @pytest.mark.asyncio
    async def test_method_and_path_distinguish_entries(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)

        await stage.handle(make_request("GET", "/api/users"))
        await stage.handle(make_request("POST", "/api/users", body={"a": 1}))
        await stage.handle(make_request("GET", "/api/posts"))

        assert spy.calls == 3
        assert len(stage) == 3

    @pytest.mark.asyncio
    async def test_entry_expires(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        request = make_request("GET", "/api/users")

        await stage.handle(request)
        clock.advance(59)
        await stage.handle(request)
        assert spy.calls == 1

        clock.advance(1)
        response = await stage.handle(request)
        assert spy.calls == 2
        assert response.headers["X-Cache"] == "MISS"

    @pytest.mark.asyncio
    async def test_hits_do_not_share_mutations(self, spy, clock):
        """Annotating a returned response must not change the stored one."""
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        request = make_request("GET", "/api/users")

        first = await stage.handle(request)
        first.set_header("X-Outer", "1")
        first.body["data"] = "mutated"

        hit = await stage.handle(request)
        hit.set_header("X-Outer", "2")

        again = await stage.handle(request)
        assert "X-Outer" not in again.headers
        assert again.body["data"] is None

    @pytest.mark.asyncio
    async def test_invalidate_and_reset(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        await stage.handle(make_request("GET", "/a"))
        await stage.handle(make_request("GET", "/b"))

        assert stage.invalidate("GET", "/a") is True
        assert stage.invalidate("GET", "/a") is False
        assert "GET:/a" not in stage
        assert "GET:/b" in stage

        stage.reset()
        assert len(stage) == 0

    @pytest.mark.asyncio
    async def test_expired_entries_swept(self, spy, clock):
        """Stale entries for keys never requested again are still evicted."""
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        for n in range(100):
            await stage.handle(make_request("GET", f"/api/users/{n}"))
        assert len(stage) == 100

        clock.advance(3600)
        await stage.handle(make_request("GET", "/api/users/new"))

        assert len(stage) == 1
        assert "GET:/api/users/new" in stage

    @pytest.mark.asyncio
    async def test_sweep_keeps_fresh_entries(self, spy, clock):
        stage = CacheStage(spy, ttl=60.0, clock=clock)
        await stage.handle(make_request("GET", "/old"))

        clock.advance(30)
        await stage.handle(make_request("GET", "/recent"))

        clock.advance(40)
        await stage.handle(make_request("GET", "/newest"))

        assert len(stage) == 2
        assert "GET:/recent" in stage
        assert "GET:/old" not in stage

    @pytest.mark.asyncio
    async def test_hit_does_not_repeat_request_id(self, spy, clock):
        stage = CacheStage(LoggingStage(spy), ttl=60.0, clock=clock)
        request = make_request("GET", "/api/users")

        miss = await stage.handle(request)
        hit = await stage.handle(request)

        assert "X-Request-ID" in miss.headers
        assert hit.headers["X-Cache"] == "HIT"
        assert "X-Request-ID" not in hit.headers

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_invalid_ttl(self, spy, ttl):
        with pytest.raises(ChainConfigurationError):
            CacheStage(spy, ttl=ttl)
