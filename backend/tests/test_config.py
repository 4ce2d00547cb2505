"""
Tutorials API — Settings Tests
===============================

Settings are built with _env_file=None so a developer's .env cannot leak in.
"""

import pytest
from pydantic import ValidationError

from app.config import Settings


class TestSettings:

    def test_port_defaults_to_8080(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        assert Settings(_env_file=None).port == 8080

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9090")
        assert Settings(_env_file=None).port == 9090

    def test_connector_defaults(self, monkeypatch):
        monkeypatch.delenv("CONNECT_MAX_RETRIES", raising=False)
        monkeypatch.delenv("CONNECT_BASE_DELAY_MS", raising=False)
        config = Settings(_env_file=None)
        assert config.connect_max_retries == 5
        assert config.connect_base_delay_ms == 2000

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_cors_origins_list(self):
        config = Settings(_env_file=None, cors_origins="http://a, http://b,")
        assert config.cors_origins_list == ["http://a", "http://b"]
