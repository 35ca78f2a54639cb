"""Configuration management using Pydantic v2 settings.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field(default="PairScope", description="Application name")
    environment: str = Field(
        default="development", description="Environment (development, production, test)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=True, description="Render logs as JSON lines (false: human-readable console output)"
    )

    # Market Data Provider Configuration
    market_data_provider: str = Field(
        default="yahoo_chart",
        description="Market data provider: 'yahoo_chart', 'yahoo', 'mock'"
    )
    yahoo_chart_base_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart",
        description="Base URL of the Yahoo Finance chart endpoint"
    )

    # Fetch Rate Limiting and Retry Configuration
    requests_per_second: float = Field(
        default=5.0,
        description="Maximum outbound price requests per second (process-wide)"
    )
    fetch_max_retries: int = Field(
        default=3,
        ge=1,
        description="Maximum attempts per price series fetch"
    )
    fetch_retry_delay: float = Field(
        default=1.0,
        description="Base delay between retries in seconds (linear backoff: delay * (attempt + 1))"
    )
    fetch_request_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for a single upstream request"
    )
    fetch_batch_size: int = Field(
        default=10, ge=1, description="Number of tickers fetched concurrently per batch"
    )
    fetch_batch_pause: float = Field(
        default=0.2, description="Pause in seconds between fetch batches"
    )
    calendar_day_multiplier: float = Field(
        default=1.5,
        description="Calendar days requested per trading day to absorb weekends and holidays"
    )

    # Cache Configuration
    price_cache_ttl: int = Field(default=3600, description="Price series cache TTL in seconds")
    price_cache_max_entries: int = Field(default=100, description="Max cached price series")
    pairs_cache_ttl: int = Field(default=900, description="Screening result cache TTL in seconds")
    pairs_cache_max_entries: int = Field(default=10, description="Max cached screening results")
    correlation_cache_ttl: int = Field(
        default=300, description="Single-pair correlation cache TTL in seconds"
    )
    correlation_cache_max_entries: int = Field(
        default=10, description="Max cached correlation reports"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
