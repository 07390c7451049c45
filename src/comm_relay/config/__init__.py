"""Application configuration."""

from .settings import (
    ApplicationSettings,
    DevelopmentSettings,
    Environment,
    ObservabilitySettings,
    ProductionSettings,
    TestingSettings,
    get_settings,
)

__all__ = [
    "ApplicationSettings",
    "DevelopmentSettings",
    "Environment",
    "ObservabilitySettings",
    "ProductionSettings",
    "TestingSettings",
    "get_settings",
]
