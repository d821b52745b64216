"""Tests for configuration management."""

import pytest

from periodic_costing.utils import config as config_module
from periodic_costing.utils.config import Config, get_config, reset_config
from periodic_costing.utils.constants import ENV_DATABASE_URL, ENV_ENVIRONMENT


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Start each test without a config singleton or environment overrides."""
    monkeypatch.delenv(ENV_ENVIRONMENT, raising=False)
    monkeypatch.delenv(ENV_DATABASE_URL, raising=False)
    reset_config()
    yield
    reset_config()


class TestConfig:
    """Tests for the Config class."""

    def test_test_environment_uses_memory_database(self):
        config = Config("test")
        assert config.database_url == "sqlite:///:memory:"

    def test_production_uses_sqlite_file(self):
        config = Config("production")
        assert config.database_url.startswith("sqlite:///")
        assert config.database_url.endswith("periodic_costing.db")

    def test_explicit_url_wins(self):
        config = Config("production", database_url="postgresql://localhost/costing")
        assert config.database_url == "postgresql://localhost/costing"

    def test_url_from_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_DATABASE_URL, "sqlite:///tmp/costing.db")
        assert Config("development").database_url == "sqlite:///tmp/costing.db"

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValueError):
            Config("staging")


class TestGetConfig:
    """Tests for the configuration singleton."""

    def test_environment_variable_selects_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_ENVIRONMENT, "test")
        assert get_config().environment == "test"

    def test_singleton(self):
        assert get_config("test") is get_config()

    def test_different_environment_keeps_singleton(self, caplog):
        first = get_config("test")
        second = get_config("development")
        assert second is first
        assert second.environment == "test"
        assert "already exists" in caplog.text

    def test_reset(self):
        first = get_config("test")
        reset_config()
        assert config_module._config_instance is None
        assert get_config("test") is not first
