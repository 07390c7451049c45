"""In-memory rate limiters."""

import asyncio
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass

import structlog

from ...domain.models import RateLimitStrategy
from .config import RateLimitConfig

logger = structlog.get_logger()


@dataclass
class RateLimitResult:
    """Rate limiting result."""

    allowed: bool
    remaining: int
    reset_time: float
    retry_after: float | None = None
    limit: int = 0
    used: int = 0


class RateLimiter(ABC):
    """Abstract base class for rate limiters."""

    def __init__(self, config: RateLimitConfig):
        """Initialize rate limiter.

        Args:
            config: Rate limiting configuration
        """
        self.config = config

    @abstractmethod
    async def consume(self, key: str, tokens: int = 1) -> RateLimitResult:
        """Consume tokens for a request.

        Args:
            key: Unique key for rate limiting
            tokens: Number of tokens to consume

        Returns:
            Rate limiting result
        """
        pass

    @abstractmethod
    async def reset(self, key: str) -> None:
        """Reset rate limit for a key.

        Args:
            key: Unique key for rate limiting
        """
        pass


@dataclass
class _Bucket:
    tokens: float
    last_refill: float


class TokenBucketRateLimiter(RateLimiter):
    """Token bucket: ``max_requests`` capacity refilled over one window."""

    def __init__(self, config: RateLimitConfig):
        super().__init__(config)
        self._buckets: dict[str, _Bucket] = {}
        self._lock = asyncio.Lock()

    @property
    def refill_rate(self) -> float:
        """Tokens added per second."""
        return self.config.max_requests / self.config.window_seconds

    async def consume(self, key: str, tokens: int = 1) -> RateLimitResult:
        async with self._lock:
            now = time.monotonic()
            bucket = self._buckets.setdefault(
                key, _Bucket(tokens=float(self.config.max_requests), last_refill=now)
            )
            self._refill(bucket, now)

            capacity = self.config.max_requests
            if bucket.tokens >= tokens:
                bucket.tokens -= tokens
                return RateLimitResult(
                    allowed=True,
                    remaining=int(bucket.tokens),
                    reset_time=now + (capacity - bucket.tokens) / self.refill_rate,
                    limit=capacity,
                    used=int(capacity - bucket.tokens),
                )

            retry_after = (tokens - bucket.tokens) / self.refill_rate
            return RateLimitResult(
                allowed=False,
                remaining=int(bucket.tokens),
                reset_time=now + retry_after,
                retry_after=retry_after,
                limit=capacity,
                used=int(capacity - bucket.tokens),
            )

    async def reset(self, key: str) -> None:
        async with self._lock:
            self._buckets.pop(key, None)

    def _refill(self, bucket: _Bucket, now: float) -> None:
        elapsed = now - bucket.last_refill
        bucket.tokens = min(
            float(self.config.max_requests), bucket.tokens + elapsed * self.refill_rate
        )
        bucket.last_refill = now


class SlidingWindowRateLimiter(RateLimiter):
    """Sliding window: at most ``max_requests`` in any ``window_seconds``."""

    def __init__(self, config: RateLimitConfig):
        super().__init__(config)
        self._windows: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()

    async def consume(self, key: str, tokens: int = 1) -> RateLimitResult:
        async with self._lock:
            now = time.monotonic()
            window = self._windows.setdefault(key, deque())

            cutoff = now - self.config.window_seconds
            while window and window[0] <= cutoff:
                window.popleft()

            limit = self.config.max_requests
            if len(window) + tokens <= limit:
                window.extend([now] * tokens)
                return RateLimitResult(
                    allowed=True,
                    remaining=limit - len(window),
                    reset_time=window[0] + self.config.window_seconds,
                    limit=limit,
                    used=len(window),
                )

            oldest = window[0] if window else now
            retry_after = max(0.0, oldest + self.config.window_seconds - now)
            return RateLimitResult(
                allowed=False,
                remaining=max(0, limit - len(window)),
                reset_time=oldest + self.config.window_seconds,
                retry_after=retry_after,
                limit=limit,
                used=len(window),
            )

    async def reset(self, key: str) -> None:
        async with self._lock:
            self._windows.pop(key, None)


def create_rate_limiter(config: RateLimitConfig) -> RateLimiter:
    """Create rate limiter based on configuration.

    Args:
        config: Rate limiting configuration

    Returns:
        Rate limiter instance
    """
    if config.strategy == RateLimitStrategy.SLIDING_WINDOW:
        limiter: RateLimiter = SlidingWindowRateLimiter(config)
    else:
        limiter = TokenBucketRateLimiter(config)

    logger.debug(
        "Created rate limiter",
        strategy=config.strategy.value,
        max_requests=config.max_requests,
        window_seconds=config.window_seconds,
    )
    return limiter
