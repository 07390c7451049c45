"""Rate limiting for dispatchers."""

from .config import RateLimitConfig, RateLimitSettings
from .limiter import (
    RateLimiter,
    RateLimitResult,
    SlidingWindowRateLimiter,
    TokenBucketRateLimiter,
    create_rate_limiter,
)
from .service import RateLimitedDispatcher

__all__ = [
    "RateLimitConfig",
    "RateLimitSettings",
    "RateLimiter",
    "RateLimitResult",
    "TokenBucketRateLimiter",
    "SlidingWindowRateLimiter",
    "create_rate_limiter",
    "RateLimitedDispatcher",
]
