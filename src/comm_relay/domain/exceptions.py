"""Exception hierarchy for comm-relay."""

from typing import Any

from .models import ErrorCode


class CommRelayException(Exception):
    """Base exception for the dispatch layer."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id


class ContextError(CommRelayException):
    """The caller's dispatch context is finished."""


class ContextCancelledError(ContextError):
    """The caller cancelled the dispatch context."""

    def __init__(self, message: str = "context cancelled"):
        super().__init__(message, ErrorCode.CANCELLED)


class ContextDeadlineExceededError(ContextError):
    """The dispatch context's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message, ErrorCode.TIMEOUT_ERROR)
