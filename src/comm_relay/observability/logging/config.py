"""Logging setup for the dispatch layer.

One ``LoggingConfig`` decides how dispatch events are filtered, enriched and
rendered. Environment presets live on the settings classes in
``comm_relay.config.settings``; ``ApplicationSettings.setup_logging`` applies
them through ``configure_logging``.
"""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from pydantic import BaseModel

from ...domain.exceptions import CommRelayException
from .correlation import CorrelationIDProcessor
from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Logging formats."""

    JSON = "json"
    CONSOLE = "console"
    STRUCTURED = "structured"


class LoggingConfig(BaseModel):
    """How dispatch logs are filtered, enriched and rendered."""

    level: LogLevel = LogLevel.INFO
    format_type: LogFormat = LogFormat.JSON
    log_file: str | None = None
    enable_correlation: bool = True
    enable_colors: bool = True
    include_timestamps: bool = True

    def setup(self) -> None:
        setup_logging(self)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "LoggingConfig":
        return cls.model_validate(config)


def add_error_code(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp the ``error_code`` of a comm-relay exception being logged.

    Failover and retry log their terminal errors with ``exc_info``; the code
    lets log queries tell an exhausted sweep from a rate limit rejection
    without parsing the traceback.
    """
    exc_info = event_dict.get("exc_info")
    if exc_info is True:
        exc_info = sys.exc_info()

    if isinstance(exc_info, tuple):
        error = exc_info[1]
    else:
        error = exc_info

    if isinstance(error, CommRelayException):
        event_dict.setdefault("error_code", error.error_code.value)
    return event_dict


def _renderer(config: LoggingConfig) -> Any:
    if config.format_type == LogFormat.CONSOLE:
        return ConsoleFormatter(colors=config.enable_colors)
    if config.format_type == LogFormat.STRUCTURED:
        return StructuredFormatter()
    return JSONFormatter()


def build_processors(config: LoggingConfig) -> list[Any]:
    """Build the structlog processor chain for a configuration."""
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_error_code,
        structlog.processors.format_exc_info,
    ]
    if config.enable_correlation:
        processors.append(CorrelationIDProcessor())
    if config.include_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(_renderer(config))
    return processors


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route stdlib logging and structlog through one renderer."""
    config = config or LoggingConfig()

    handler: logging.Handler
    if config.log_file:
        handler = logging.FileHandler(config.log_file)
    else:
        handler = logging.StreamHandler(sys.stdout)
    logging.basicConfig(
        level=getattr(logging, config.level.value),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=build_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]


_logging_config: LoggingConfig | None = None


def configure_logging(config: LoggingConfig) -> None:
    """Apply a configuration and remember it as the active one."""
    global _logging_config
    _logging_config = config
    config.setup()


def get_logging_config() -> LoggingConfig | None:
    """Get the active logging configuration, if any was applied."""
    return _logging_config
