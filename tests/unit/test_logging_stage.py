"""
Unit tests for the logging stage.
"""

import json
import logging

import pytest

from requestchain.errors import ChainConfigurationError
from requestchain.http import make_request
from requestchain.stages import LoggingStage, RequestLog


ACCESS_LOGGER = "requestchain.access"


def access_records(caplog):
    return [r for r in caplog.records if r.name == ACCESS_LOGGER]


class StepTimer:
    """Timer that advances a fixed step every time it is read."""

    def __init__(self, step: float):
        self.value = 0.0
        self.step = step

    def __call__(self) -> float:
        current = self.value
        self.value += self.step
        return current


class TestRequestLog:

    def test_start_entry_has_no_status(self):
        entry = RequestLog(
            request_id="abc", event="start", method="GET", path="/x",
            client_id="c1", timestamp="now",
        )

        assert "status_code" not in entry.to_dict()
        assert entry.to_text() == "[abc] START GET /x client=c1"

    def test_end_entry(self):
        entry = RequestLog(
            request_id="abc", event="end", method="GET", path="/x",
            client_id="c1", timestamp="now", status_code=200, duration_ms=3.14159,
        )

        assert entry.to_dict()["duration_ms"] == 3.14
        assert entry.to_text() == "[abc] END   GET /x client=c1 200 3.14ms"


class TestLoggingStage:
    """Tests for LoggingStage."""

    @pytest.mark.asyncio
    async def test_one_start_end_pair(self, spy, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)
        stage = LoggingStage(spy, timer=StepTimer(0.005))

        response = await stage.handle(make_request("GET", "/api/users", client_id="client-1"))

        records = access_records(caplog)
        assert len(records) == 2
        assert "START GET /api/users client=client-1" in records[0].getMessage()
        assert records[1].getMessage().endswith("200 5.00ms")

        request_id = response.headers["X-Request-ID"]
        assert all(f"[{request_id}]" in r.getMessage() for r in records)

    @pytest.mark.asyncio
    async def test_json_format(self, spy, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)
        stage = LoggingStage(spy, log_format="json", timer=StepTimer(0.002))

        await stage.handle(make_request("POST", "/api/users", body={"a": 1}))

        start, end = [json.loads(r.getMessage()) for r in access_records(caplog)]
        assert start["event"] == "start"
        assert end["event"] == "end"
        assert end["status_code"] == 200
        assert end["duration_ms"] == 2.0
        assert end["client_id"] == "-"
        assert start["request_id"] == end["request_id"]

    @pytest.mark.asyncio
    async def test_request_id_header_optional(self, spy):
        stage = LoggingStage(spy, include_request_id=False)

        response = await stage.handle(make_request("GET", "/"))

        assert "X-Request-ID" not in response.headers

    @pytest.mark.asyncio
    async def test_failure_logged_and_reraised(self, caplog):
        caplog.set_level(logging.INFO, logger=ACCESS_LOGGER)

        class Broken:
            async def handle(self, request):
                raise RuntimeError("boom")

        stage = LoggingStage(Broken())

        with pytest.raises(RuntimeError, match="boom"):
            await stage.handle(make_request("GET", "/broken"))

        records = access_records(caplog)
        assert len(records) == 2
        assert records[1].levelno == logging.ERROR
        assert "RuntimeError: boom" in records[1].getMessage()

    def test_invalid_format(self, spy):
        with pytest.raises(ChainConfigurationError):
            LoggingStage(spy, log_format="xml")
