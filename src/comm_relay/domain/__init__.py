"""Domain models and exceptions."""

from .exceptions import (
    CommRelayException,
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
)
from .models import ErrorCode, FailoverPolicy, RateLimitStrategy, RetryStrategy

__all__ = [
    "CommRelayException",
    "ContextError",
    "ContextCancelledError",
    "ContextDeadlineExceededError",
    "ErrorCode",
    "FailoverPolicy",
    "RetryStrategy",
    "RateLimitStrategy",
]
