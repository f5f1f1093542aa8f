"""Tests for settings."""

import pytest
from pydantic import ValidationError

from apksig.config import Settings, get_settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default settings."""
        for var in ("APKSIG_LOG_LEVEL", "APKSIG_LOG_JSON", "APKSIG_ENVIRONMENT", "APKSIG_CATALOG_VALIDATION"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.catalog_validation == "strict"
        assert not settings.is_production

    def test_from_environment(self, monkeypatch):
        """Test APKSIG_ prefixed variables are read."""
        monkeypatch.setenv("APKSIG_ENVIRONMENT", "production")
        monkeypatch.setenv("APKSIG_LOG_LEVEL", "debug")
        monkeypatch.setenv("APKSIG_LOG_JSON", "true")
        monkeypatch.setenv("APKSIG_CATALOG_VALIDATION", "WARN")
        settings = Settings(_env_file=None)

        assert settings.is_production
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.catalog_validation == "warn"

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_invalid_validation_level(self):
        """Test unknown catalog validation levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, catalog_validation="sometimes")

    def test_get_settings_is_cached(self):
        """Test get_settings() returns one instance."""
        assert get_settings() is get_settings()

    def test_production_defaults_to_json_logs(self, monkeypatch):
        """Test production turns on JSON logs when APKSIG_LOG_JSON is unset."""
        monkeypatch.setenv("APKSIG_ENVIRONMENT", "production")
        monkeypatch.delenv("APKSIG_LOG_JSON", raising=False)
        settings = Settings(_env_file=None)

        assert settings.is_production
        assert settings.log_json is True

    def test_production_respects_explicit_log_json(self, monkeypatch):
        """Test an explicit APKSIG_LOG_JSON=false wins in production."""
        monkeypatch.setenv("APKSIG_ENVIRONMENT", "production")
        monkeypatch.setenv("APKSIG_LOG_JSON", "false")
        settings = Settings(_env_file=None)

        assert settings.log_json is False
