"""Structured logging configuration and utilities."""

from .config import (
    LogFormat,
    LoggingConfig,
    LogLevel,
    add_error_code,
    build_processors,
    configure_logging,
    get_logger,
    get_logging_config,
    setup_logging,
)
from .correlation import (
    CorrelationIDProcessor,
    clear_correlation_id,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .formatters import ConsoleFormatter, JSONFormatter, StructuredFormatter

__all__ = [
    "setup_logging",
    "configure_logging",
    "get_logging_config",
    "build_processors",
    "add_error_code",
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "get_logger",
    "JSONFormatter",
    "ConsoleFormatter",
    "StructuredFormatter",
    "CorrelationIDProcessor",
    "correlation_scope",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "generate_correlation_id",
]
