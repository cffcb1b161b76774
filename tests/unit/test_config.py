"""
Unit tests for ChainConfig.
"""

import logging

import pytest

from requestchain.config import DEFAULT_LOG_FORMAT, ChainConfig, configure_logging
from requestchain.errors import ChainConfigurationError


class TestChainConfig:

    def test_defaults(self):
        config = ChainConfig()

        assert config.rate_limit == 5
        assert config.rate_window == 60.0
        assert config.cache_ttl == 60.0
        assert config.body_required_methods == ("POST",)
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAIN_RATE_LIMIT", "10")
        monkeypatch.setenv("CHAIN_CACHE_TTL", "2.5")
        monkeypatch.setenv("CHAIN_LOG_FORMAT", "json")

        config = ChainConfig.from_env()

        assert config.rate_limit == 10
        assert config.cache_ttl == 2.5
        assert config.log_format == "json"
        assert config.rate_window == 60.0

    def test_from_env_bad_number(self, monkeypatch):
        monkeypatch.setenv("CHAIN_RATE_LIMIT", "lots")

        with pytest.raises(ChainConfigurationError):
            ChainConfig.from_env()

    @pytest.mark.parametrize("field, value", [
        ("rate_limit", 0),
        ("rate_window", 0),
        ("cache_ttl", -1),
        ("handler_delay", -0.5),
        ("log_format", "xml"),
        ("log_level", "CHATTY"),
    ])
    def test_validate_rejects(self, field, value):
        config = ChainConfig(**{field: value})

        with pytest.raises(ChainConfigurationError):
            config.validate()


class TestConfigureLogging:

    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        logger = logging.getLogger("requestchain")
        previous = logger.level
        yield calls
        logger.setLevel(previous)

    def test_defaults(self, basic_config_calls):
        configure_logging()

        assert basic_config_calls[0]["format"] == DEFAULT_LOG_FORMAT
        assert basic_config_calls[0]["level"] == logging.INFO
        assert logging.getLogger("requestchain").level == logging.INFO

    def test_custom_format_and_level(self, basic_config_calls):
        configure_logging("debug", fmt="%(levelname)s %(message)s")

        assert basic_config_calls[0]["format"] == "%(levelname)s %(message)s"
        assert basic_config_calls[0]["level"] == logging.DEBUG
        assert logging.getLogger("requestchain").level == logging.DEBUG
