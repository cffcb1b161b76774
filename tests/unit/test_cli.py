"""
Tests for the demonstration scenarios and the command-line entry point.
"""

import pytest

from requestchain import ChainConfig, build_chain
from requestchain.__main__ import build_parser, main
from requestchain.demo import run_chain_scenario, run_factory_scenario, run_order_scenario
from requestchain.patterns import OrderService, OrderStatus


class TestScenarios:

    @pytest.mark.asyncio
    async def test_chain_scenario(self, clock):
        lines = []
        chain = build_chain(ChainConfig(), clock=clock)

        results = await run_chain_scenario(chain, write=lines.append)

        statuses = [int(response.status) for _, response in results]
        assert statuses[:4] == [200, 200, 401, 400]
        assert results[1][1].headers["X-Cache"] == "HIT"
        # Two requests were admitted before the burst of six.
        assert sorted(statuses[4:]) == [200, 200, 200, 429, 429, 429]
        assert lines[0] == "=== Request chain ==="

    def test_order_scenario(self):
        lines = []

        order, cancelled = run_order_scenario(OrderService(), write=lines.append)

        assert order.status is OrderStatus.DELIVERED
        assert cancelled.status is OrderStatus.CANCELLED
        assert any("Order already delivered" in line for line in lines)

    def test_factory_scenario(self):
        lines = []

        cars = run_factory_scenario(write=lines.append)

        assert len(cars) == 9
        assert "  suv BMW (japan)" in lines


class TestMain:

    def test_factory_only(self, capsys):
        assert main(["--scenario", "factory"]) == 0

        out = capsys.readouterr().out
        assert "=== Vehicle factory ===" in out
        assert "=== Request chain ===" not in out

    def test_chain(self, capsys):
        assert main(["--scenario", "chain", "--log-level", "WARNING"]) == 0

        assert "=== Request chain ===" in capsys.readouterr().out

    def test_bad_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("CHAIN_RATE_LIMIT", "abc")

        assert main(["--scenario", "factory"]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_negative_delay(self, capsys):
        assert main(["--scenario", "chain", "--delay", "-1"]) == 2

    def test_unknown_scenario(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--scenario", "nope"])
