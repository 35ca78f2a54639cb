"""Unit tests for application configuration.

Tests the Settings class in pairscope.core.config, ensuring config fields
have correct default values and honour environment overrides.
"""
import pytest
from pydantic import ValidationError

from pairscope.core.config import Settings, get_settings
from pairscope.services.price_source import FetchConfig


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_fetch_rate_limit_defaults(self) -> None:
        """Test fetch throttle and retry config fields have correct defaults."""
        settings = Settings()
        assert settings.requests_per_second == 5.0
        assert settings.fetch_max_retries == 3
        assert settings.fetch_retry_delay == 1.0
        assert settings.fetch_request_timeout == 10.0

    def test_fetch_batch_defaults(self) -> None:
        """Test batching config fields have correct defaults."""
        settings = Settings()
        assert settings.fetch_batch_size == 10
        assert settings.fetch_batch_pause == 0.2
        assert settings.calendar_day_multiplier == 1.5

    def test_cache_defaults(self) -> None:
        """Test cache TTL and capacity defaults."""
        settings = Settings()
        assert settings.price_cache_ttl == 3600
        assert settings.price_cache_max_entries == 100
        assert settings.pairs_cache_ttl == 900
        assert settings.pairs_cache_max_entries == 10
        assert settings.correlation_cache_ttl == 300
        assert settings.correlation_cache_max_entries == 10

    def test_environment_override(self, monkeypatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("FETCH_MAX_RETRIES", "5")
        monkeypatch.setenv("PAIRS_CACHE_TTL", "60")

        settings = Settings()

        assert settings.fetch_max_retries == 5
        assert settings.pairs_cache_ttl == 60

    def test_environment_flags(self) -> None:
        assert Settings(environment="production").is_production
        assert Settings(environment="development").is_development
        assert not Settings(environment="test").is_development

    def test_fetch_config_from_settings(self) -> None:
        config = FetchConfig.from_settings(Settings(fetch_batch_size=4, fetch_retry_delay=0.5))
        assert config.batch_size == 4
        assert config.retry_delay == 0.5
        assert config.max_retries == 3


class TestGetSettings:
    """Tests for get_settings() function."""

    def test_get_settings_returns_settings_instance(self) -> None:
        """Test that get_settings() returns a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings() returns the same cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2


class TestSettingsValidation:
    """Tests for Settings field constraints."""

    def test_zero_batch_size_rejected(self) -> None:
        """A zero batch size would make batched fetches impossible."""
        with pytest.raises(ValidationError):
            Settings(fetch_batch_size=0)

    def test_zero_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(fetch_max_retries=0)

    def test_batch_size_env_override_validated(self, monkeypatch) -> None:
        monkeypatch.setenv("FETCH_BATCH_SIZE", "0")

        with pytest.raises(ValidationError):
            Settings()
