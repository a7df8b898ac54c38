"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from config import Config, load_config


class TestConfig:
    """Test configuration defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        for name in ("SHORT_DB", "REDIS_URL", "BASE_URL", "PORT", "HOST"):
            monkeypatch.delenv(name, raising=False)

        config = Config(_env_file=None)

        assert config.short_db is None
        assert config.redis_url is None
        assert config.base_url == "http://yaus.pw"
        assert config.port == 3000
        assert config.locator_length == 7
        assert config.max_locator_length == 12
        assert config.storage_timeout_seconds == 5.0

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHORT_DB", "postgresql://u:p@db:5432/yaus")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("BASE_URL", "https://s.example")
        monkeypatch.setenv("LOG_JSON", "true")

        config = load_config()

        assert config.short_db == "postgresql://u:p@db:5432/yaus"
        assert config.port == 8080
        assert config.base_url == "https://s.example"
        assert config.log_json is True

    def test_max_length_below_length(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, locator_length=8, max_locator_length=7)

    def test_nonpositive_timeout(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, storage_timeout_seconds=0)
