"""Tests for ValidationSettings."""

import pytest

from dataknobs_validation import ConfigurationError, ValidationSettings, ValidatorRegistry
from dataknobs_validation.settings import ENV_PREFIX, parse_bool


class TestParseBool:
    """Test boolean parsing."""

    @pytest.mark.parametrize("raw", [True, "1", "true", "Yes", " ON "])
    def test_true_values(self, raw):
        assert parse_bool(raw, "key") is True

    @pytest.mark.parametrize("raw", [False, "0", "false", "No", "off"])
    def test_false_values(self, raw):
        assert parse_bool(raw, "key") is False

    def test_invalid_value(self):
        """Test unrecognized values raise with context."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_bool("maybe", "cache_validators")
        assert exc_info.value.context == {"key": "cache_validators", "value": "maybe"}


class TestValidationSettings:
    """Test building settings from the supported sources."""

    def test_defaults(self):
        """Test every flag defaults to True."""
        assert ValidationSettings().to_dict() == {
            "continue_validation": True,
            "ignore_empty_results": True,
            "cache_validators": True,
        }

    def test_from_dict(self):
        """Test dictionaries with string booleans and unknown keys."""
        settings = ValidationSettings.from_dict(
            {"ignore_empty_results": "no", "cache_validators": False, "unused": 1}
        )
        assert settings.ignore_empty_results is False
        assert settings.cache_validators is False
        assert settings.continue_validation is True

    def test_from_empty_dict(self):
        """Test None and empty dictionaries give defaults."""
        assert ValidationSettings.from_dict(None) == ValidationSettings()
        assert ValidationSettings.from_dict({}) == ValidationSettings()

    def test_from_env(self, monkeypatch):
        """Test environment variables with the default prefix."""
        monkeypatch.setenv(f"{ENV_PREFIX}IGNORE_EMPTY_RESULTS", "false")
        monkeypatch.setenv(f"{ENV_PREFIX}CACHE_VALIDATORS", "0")
        monkeypatch.delenv(f"{ENV_PREFIX}CONTINUE_VALIDATION", raising=False)

        settings = ValidationSettings.from_env()
        assert settings == ValidationSettings(ignore_empty_results=False, cache_validators=False)

    def test_from_env_custom_prefix(self, monkeypatch):
        """Test a custom prefix."""
        monkeypatch.setenv("MYAPP_CONTINUE_VALIDATION", "off")
        assert ValidationSettings.from_env("MYAPP_").continue_validation is False

    def test_from_env_invalid(self, monkeypatch):
        """Test invalid environment values raise."""
        monkeypatch.setenv(f"{ENV_PREFIX}CACHE_VALIDATORS", "sometimes")
        with pytest.raises(ConfigurationError):
            ValidationSettings.from_env()

    def test_create_provider(self):
        """Test the provider follows cache_validators."""
        provider = ValidationSettings(cache_validators=False).create_provider("forms")
        assert isinstance(provider, ValidatorRegistry)
        assert provider.name == "forms"
        assert provider.is_cached is False
