"""Resilience patterns for dispatch backends.

This package provides failover across redundant backends, retry with
configurable backoff and rate limiting. Every pattern is itself a
``Dispatcher``, so they compose by wrapping one another.
"""

from .exceptions import (
    AllBackendsFailedException,
    BackendDispatchException,
    RateLimitExceededException,
    RateLimiterUnavailableException,
    ResilienceException,
    RetryExhaustedException,
)
from .failover import (
    AtomicCounter,
    BackendCursor,
    CooldownRecovery,
    FailoverConfig,
    FailoverSettings,
    RecoveryTask,
    RoundRobinFailoverDispatcher,
    ThresholdFailoverDispatcher,
)
from .integration import build_dispatcher, build_dispatcher_from_settings
from .rate_limiting import (
    RateLimitConfig,
    RateLimitedDispatcher,
    RateLimiter,
    RateLimitSettings,
    create_rate_limiter,
)
from .retry import RetryConfig, RetryDispatcher, RetrySettings

__all__ = [
    "RoundRobinFailoverDispatcher",
    "ThresholdFailoverDispatcher",
    "CooldownRecovery",
    "RecoveryTask",
    "AtomicCounter",
    "BackendCursor",
    "FailoverConfig",
    "FailoverSettings",
    "RetryDispatcher",
    "RetryConfig",
    "RetrySettings",
    "RateLimitedDispatcher",
    "RateLimiter",
    "RateLimitConfig",
    "RateLimitSettings",
    "create_rate_limiter",
    "build_dispatcher",
    "build_dispatcher_from_settings",
    "ResilienceException",
    "BackendDispatchException",
    "AllBackendsFailedException",
    "RetryExhaustedException",
    "RateLimitExceededException",
    "RateLimiterUnavailableException",
]
