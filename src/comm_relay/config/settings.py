"""
Configuration management for comm-relay.

Environment-specific settings built with pydantic-settings. Each resilience
component owns its settings class; ``ApplicationSettings`` aggregates them
and ``get_settings`` picks the class for the current environment.
"""

import os
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..observability.logging import (
    LogFormat,
    LoggingConfig,
    LogLevel,
    configure_logging,
)
from ..resilience.failover.config import FailoverSettings
from ..resilience.rate_limiting.config import RateLimitSettings
from ..resilience.retry.config import RetrySettings


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore"
    )

    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON
    log_file: str | None = None
    enable_correlation: bool = True
    include_timestamps: bool = True

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return LoggingConfig(
            level=self.log_level,
            format_type=self.log_format,
            log_file=self.log_file,
            enable_correlation=self.enable_correlation,
            include_timestamps=self.include_timestamps,
        )


class ApplicationSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = "comm-relay"
    environment: Environment = Environment.DEVELOPMENT

    # Optional layers around the failover policy
    retry_enabled: bool = False
    rate_limit_enabled: bool = False

    failover: FailoverSettings = Field(default_factory=FailoverSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    def setup_logging(self) -> None:
        """Configure logging from the observability settings."""
        configure_logging(self.observability.get_logging_config())


class DevelopmentSettings(ApplicationSettings):
    """Development environment settings."""

    environment: Environment = Environment.DEVELOPMENT

    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            log_level=LogLevel.DEBUG, log_format=LogFormat.CONSOLE
        )
    )


class TestingSettings(ApplicationSettings):
    """Testing environment settings."""

    environment: Environment = Environment.TESTING

    # Fast retries so tests never sleep for long
    retry: RetrySettings = Field(
        default_factory=lambda: RetrySettings(base_delay=0.0, max_delay=0.1)
    )
    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            log_level=LogLevel.WARNING,
            log_format=LogFormat.STRUCTURED,
            enable_correlation=False,
            include_timestamps=False,
        )
    )


class ProductionSettings(ApplicationSettings):
    """Production environment settings."""

    environment: Environment = Environment.PRODUCTION
    retry_enabled: bool = True


def get_settings() -> ApplicationSettings:
    """Get application settings based on environment."""
    environment = os.getenv("ENVIRONMENT", "development").lower()

    if environment == Environment.DEVELOPMENT.value:
        return DevelopmentSettings()
    elif environment == Environment.TESTING.value:
        return TestingSettings()
    elif environment == Environment.PRODUCTION.value:
        return ProductionSettings()
    else:
        raise ValueError(f"Unknown environment: {environment}")
