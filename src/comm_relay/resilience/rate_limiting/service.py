"""Rate-limited dispatcher."""

from typing import Any, TypeVar

import structlog

from ...dispatch.base import Dispatcher
from ...dispatch.context import DispatchContext
from ..exceptions import RateLimitExceededException, RateLimiterUnavailableException
from .limiter import RateLimiter

T = TypeVar("T")


class RateLimitedDispatcher(Dispatcher[T]):
    """Admits dispatches through a rate limiter before delegating."""

    def __init__(
        self,
        backend: Dispatcher[T],
        limit_key: str,
        limiter: RateLimiter,
        logger: Any | None = None,
    ):
        """Initialize rate-limited dispatcher.

        Args:
            backend: Dispatcher to protect
            limit_key: Key the limiter counts requests under
            limiter: Rate limiter instance
            logger: Optional structlog logger
        """
        self._backend = backend
        self.limit_key = limit_key
        self._limiter = limiter
        self._logger = logger if logger is not None else structlog.get_logger()

    @property
    def backend(self) -> Dispatcher[T]:
        return self._backend

    async def dispatch(
        self, ctx: DispatchContext, template: str, args: T, *recipients: str
    ) -> None:
        """Dispatch if the limiter admits the request.

        Raises:
            RateLimiterUnavailableException: The limiter itself failed
            RateLimitExceededException: The request was rejected
        """
        try:
            result = await self._limiter.consume(self.limit_key)
        except Exception as error:
            raise RateLimiterUnavailableException(self.limit_key, str(error)) from error

        if not result.allowed:
            self._logger.warning(
                "Rate limit exceeded",
                limit_key=self.limit_key,
                limit=result.limit,
                retry_after=result.retry_after,
            )
            raise RateLimitExceededException(self.limit_key, result.retry_after)

        await self._backend.dispatch(ctx, template, args, *recipients)
