"""
Settings tests
"""

import logging

from core.config import DEFAULT_API_BASE, DEFAULT_TIMEOUT_SECONDS, Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.api_base == DEFAULT_API_BASE
        assert settings.user_agent == "weather-mcp/1.0"
        assert settings.timeout_seconds == 10.0
        assert settings.log_buffer_size == 100
        assert settings.transport == "stdio"

    def test_overrides(self):
        settings = Settings.from_env({
            "NWS_API_BASE": "http://localhost:8080/",
            "NWS_USER_AGENT": "test-agent/0.1",
            "NWS_TIMEOUT_SECONDS": "2.5",
            "LOG_BUFFER_SIZE": "10",
            "MCP_TRANSPORT": "http",
        })
        assert settings.api_base == "http://localhost:8080"
        assert settings.user_agent == "test-agent/0.1"
        assert settings.timeout_seconds == 2.5
        assert settings.log_buffer_size == 10
        assert settings.transport == "http"

    def test_invalid_numbers_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="core.config"):
            settings = Settings.from_env({"NWS_TIMEOUT_SECONDS": "soon", "LOG_BUFFER_SIZE": "-4"})

        assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert settings.log_buffer_size == 100
        assert len(caplog.records) == 2
