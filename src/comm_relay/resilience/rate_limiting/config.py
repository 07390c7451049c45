"""Rate limiting configuration models and settings."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.models import RateLimitStrategy


class RateLimitConfig(BaseModel):
    """Rate limiting configuration."""

    max_requests: int = Field(
        default=60, ge=1, description="Requests admitted per window"
    )
    window_seconds: float = Field(
        default=60.0, gt=0.0, description="Window length in seconds"
    )
    strategy: RateLimitStrategy = Field(
        default=RateLimitStrategy.TOKEN_BUCKET, description="Limiting algorithm"
    )


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_", env_file=".env", extra="ignore"
    )

    max_requests: int = 60
    window_seconds: float = 60.0
    strategy: RateLimitStrategy = RateLimitStrategy.TOKEN_BUCKET
    key: str = "dispatch"

    def get_config(self) -> RateLimitConfig:
        """Get validated rate limiting configuration."""
        return RateLimitConfig(
            max_requests=self.max_requests,
            window_seconds=self.window_seconds,
            strategy=self.strategy,
        )
