"""Observability for the dispatch layer.

Only structured logging lives here; dispatchers log through structlog and
never depend on it for control flow.
"""

from .logging import LogFormat, LoggingConfig, LogLevel, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "get_logger",
]
