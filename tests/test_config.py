"""Tests for environment-backed settings."""

import logging

from zdata.config import Settings, configure_logging
from zdata.validation import API_CONFIG_SCHEMA, collect_failures


class TestSettings:
    """Test Settings loading."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.timeout_ms == 10_000
        assert settings.enable_cache is False
        assert settings.cache_default_ttl_ms == 300_000
        assert settings.retry_max_attempts == 3

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("ZDATA_BASE_URL", "https://api.example.com")
        monkeypatch.setenv("ZDATA_WORKSPACE_ID", "ws-1")
        monkeypatch.setenv("ZDATA_ENABLE_CACHE", "true")
        monkeypatch.setenv("ZDATA_CACHE_MAX_ENTRIES", "25")

        settings = Settings(_env_file=None)

        assert settings.base_url == "https://api.example.com"
        assert settings.workspace_id == "ws-1"
        assert settings.enable_cache is True
        assert settings.cache_max_entries == 25

    def test_client_config_is_valid(self):
        settings = Settings(_env_file=None, workspace_id="ws-1", cache_max_entries=10)

        config = settings.to_client_config()

        assert collect_failures(API_CONFIG_SCHEMA, config) == []
        assert config["cache_config"] == {"default_ttl_ms": 300_000, "max_entries": 10}
        assert config["retry_config"]["max_attempts"] == 3

    def test_client_config_omits_unbounded_max_entries(self):
        config = Settings(_env_file=None, workspace_id="ws-1").to_client_config()
        assert "max_entries" not in config["cache_config"]


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("debug")

    assert calls[0]["level"] == "DEBUG"
