"""Domain models for the dispatch layer."""

from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes."""

    VALIDATION_ERROR = "validation_error"
    RATE_LIMIT_ERROR = "rate_limit_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    ALL_BACKENDS_FAILED = "all_backends_failed"
    RETRY_EXHAUSTED = "retry_exhausted"
    TIMEOUT_ERROR = "timeout_error"
    CANCELLED = "cancelled"
    INTERNAL_ERROR = "internal_error"


class FailoverPolicy(str, Enum):
    """Backend selection policies."""

    ROUND_ROBIN = "round_robin"
    THRESHOLD = "threshold"


class RetryStrategy(str, Enum):
    """Wait strategies between retry attempts."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class RateLimitStrategy(str, Enum):
    """Rate limiting algorithms."""

    TOKEN_BUCKET = "token_bucket"
    SLIDING_WINDOW = "sliding_window"
