"""Retry configuration models and settings."""

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.models import RetryStrategy


class RetryConfig(BaseModel):
    """Retry configuration for a dispatcher."""

    max_attempts: int = Field(
        default=3, ge=1, le=10, description="Maximum dispatch attempts"
    )
    base_delay: float = Field(
        default=1.0, ge=0.0, le=60.0, description="Base delay in seconds"
    )
    max_delay: float = Field(
        default=60.0, ge=0.0, le=300.0, description="Maximum delay in seconds"
    )
    multiplier: float = Field(
        default=2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier"
    )
    jitter: bool = Field(
        default=True, description="Add jitter to prevent thundering herd"
    )
    strategy: RetryStrategy = Field(
        default=RetryStrategy.FIXED, description="Wait strategy between attempts"
    )

    @field_validator("max_delay")
    @classmethod
    def validate_max_delay(cls, v: float, info: Any) -> float:
        """Ensure max_delay is greater than base_delay."""
        if info.data.get("base_delay") and v <= info.data["base_delay"]:
            raise ValueError("max_delay must be greater than base_delay")
        return v


class RetrySettings(BaseSettings):
    """Retry configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="RETRY_", env_file=".env", extra="ignore"
    )

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    multiplier: float = 2.0
    jitter: bool = True
    strategy: RetryStrategy = RetryStrategy.FIXED

    def get_config(self) -> RetryConfig:
        """Get validated retry configuration."""
        return RetryConfig(
            max_attempts=self.max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            multiplier=self.multiplier,
            jitter=self.jitter,
            strategy=self.strategy,
        )
