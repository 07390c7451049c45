"""Resilience-specific exceptions."""

from collections.abc import Sequence
from typing import Any

from ..domain.exceptions import CommRelayException
from ..domain.models import ErrorCode


class ResilienceException(CommRelayException):
    """Base exception for resilience patterns."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message, error_code, details, correlation_id)


class BackendDispatchException(ResilienceException):
    """A concrete backend failed to dispatch."""

    def __init__(
        self,
        message: str,
        backend: str,
        is_retryable: bool = True,
        correlation_id: str | None = None,
    ):
        super().__init__(
            message,
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            {"backend": backend, "is_retryable": is_retryable},
            correlation_id,
        )
        self.backend = backend
        self.is_retryable = is_retryable


class AllBackendsFailedException(ResilienceException):
    """Every backend in a failover sweep failed."""

    def __init__(
        self,
        service_name: str,
        errors: Sequence[BaseException],
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"All {len(errors)} backends failed for service: {service_name}",
            ErrorCode.ALL_BACKENDS_FAILED,
            {
                "service_name": service_name,
                "attempts": len(errors),
                "errors": [f"{type(e).__name__}: {e}" for e in errors],
            },
            correlation_id,
        )
        self.service_name = service_name
        self.errors = list(errors)


class RateLimitExceededException(ResilienceException):
    """Rate limit exceeded exception."""

    def __init__(
        self,
        service_name: str,
        retry_after: float | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for service: {service_name}",
            ErrorCode.RATE_LIMIT_ERROR,
            {"service_name": service_name, "retry_after": retry_after},
            correlation_id,
        )
        self.service_name = service_name
        self.retry_after = retry_after


class RateLimiterUnavailableException(ResilienceException):
    """The rate limiter could not decide whether to admit a request."""

    def __init__(
        self,
        service_name: str,
        reason: str,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Rate limiter failed for service: {service_name}",
            ErrorCode.INTERNAL_ERROR,
            {"service_name": service_name, "reason": reason},
            correlation_id,
        )
        self.service_name = service_name
        self.reason = reason


class RetryExhaustedException(ResilienceException):
    """Retry attempts exhausted exception."""

    def __init__(
        self,
        service_name: str,
        max_attempts: int,
        last_error: str,
        correlation_id: str | None = None,
    ):
        super().__init__(
            f"Retry attempts exhausted for service: {service_name}",
            ErrorCode.RETRY_EXHAUSTED,
            {
                "service_name": service_name,
                "max_attempts": max_attempts,
                "last_error": last_error,
            },
            correlation_id,
        )
        self.service_name = service_name
        self.max_attempts = max_attempts
        self.last_error = last_error
