"""Assembly of resilience layers around a set of backends."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from ..dispatch.base import Dispatcher
from ..domain.models import FailoverPolicy
from .failover import (
    FailoverConfig,
    RoundRobinFailoverDispatcher,
    ThresholdFailoverDispatcher,
)
from .rate_limiting import RateLimitConfig, RateLimitedDispatcher, create_rate_limiter
from .retry import RetryConfig, RetryDispatcher

if TYPE_CHECKING:
    from ..config.settings import ApplicationSettings

T = TypeVar("T")


def build_dispatcher(
    backends: Sequence[Dispatcher[T]],
    failover: FailoverConfig,
    retry: RetryConfig | None = None,
    rate_limit: RateLimitConfig | None = None,
    rate_limit_key: str = "dispatch",
    logger: Any | None = None,
) -> Dispatcher[T]:
    """Compose backends into one resilient dispatcher.

    Layers, innermost first: per-backend rate limiting, the failover policy,
    then retry around the whole failover.

    Args:
        backends: Ordered backends, at least one
        failover: Failover configuration; selects the policy
        retry: Optional retry configuration for the outer layer
        rate_limit: Optional rate limiting configuration; one limiter is
            shared by all backends, keyed ``"{rate_limit_key}:{index}"``
        rate_limit_key: Prefix of the rate limit keys
        logger: Optional structlog logger passed to every layer

    Returns:
        The outermost dispatcher
    """
    log = logger if logger is not None else structlog.get_logger()

    layered: list[Dispatcher[T]] = list(backends)
    if rate_limit is not None:
        limiter = create_rate_limiter(rate_limit)
        layered = [
            RateLimitedDispatcher(backend, f"{rate_limit_key}:{index}", limiter, log)
            for index, backend in enumerate(layered)
        ]

    dispatcher: Dispatcher[T]
    if failover.policy == FailoverPolicy.THRESHOLD:
        dispatcher = ThresholdFailoverDispatcher.from_config(layered, failover, log)
    else:
        dispatcher = RoundRobinFailoverDispatcher(layered, logger=log)

    if retry is not None:
        dispatcher = RetryDispatcher(dispatcher, retry, logger=log)

    log.info(
        "Built resilient dispatcher",
        backends=len(layered),
        policy=failover.policy.value,
        retry=retry is not None,
        rate_limit=rate_limit is not None,
    )
    return dispatcher


def build_dispatcher_from_settings(
    backends: Sequence[Dispatcher[T]],
    settings: "ApplicationSettings",
    logger: Any | None = None,
) -> Dispatcher[T]:
    """Compose backends according to application settings."""
    return build_dispatcher(
        backends,
        failover=settings.failover.get_config(),
        retry=settings.retry.get_config() if settings.retry_enabled else None,
        rate_limit=(
            settings.rate_limit.get_config() if settings.rate_limit_enabled else None
        ),
        rate_limit_key=settings.rate_limit.key,
        logger=logger,
    )
