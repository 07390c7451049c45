"""Failover configuration models and settings."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.models import FailoverPolicy


class FailoverConfig(BaseModel):
    """Failover configuration for a set of redundant backends."""

    policy: FailoverPolicy = Field(
        default=FailoverPolicy.ROUND_ROBIN, description="Backend selection policy"
    )
    threshold: int = Field(
        default=3,
        ge=0,
        description="Consecutive timeouts tolerated before switching backend",
    )
    recovery_enabled: bool = Field(
        default=False,
        description="Restore the preferred backend after a cool-down",
    )
    recovery_cooldown: float = Field(
        default=30.0, ge=0.0, description="Cool-down in seconds before recovery"
    )
    recovery_index: int = Field(
        default=0, ge=0, description="Backend index restored by recovery"
    )


class FailoverSettings(BaseSettings):
    """Failover configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="FAILOVER_", env_file=".env", extra="ignore"
    )

    policy: FailoverPolicy = FailoverPolicy.ROUND_ROBIN
    threshold: int = 3
    recovery_enabled: bool = False
    recovery_cooldown: float = 30.0
    recovery_index: int = 0

    def get_config(self) -> FailoverConfig:
        """Get validated failover configuration."""
        return FailoverConfig(
            policy=self.policy,
            threshold=self.threshold,
            recovery_enabled=self.recovery_enabled,
            recovery_cooldown=self.recovery_cooldown,
            recovery_index=self.recovery_index,
        )
