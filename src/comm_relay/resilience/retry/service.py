"""Retrying dispatcher built on tenacity."""

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
    wait_fixed,
)

from ...dispatch.base import Dispatcher
from ...dispatch.context import DispatchContext
from ...domain.exceptions import ContextCancelledError
from ...domain.models import RetryStrategy
from ..exceptions import RetryExhaustedException
from .config import RetryConfig

T = TypeVar("T")

WaitFunc = Callable[[RetryCallState], float]


def build_wait(
    config: RetryConfig, interval_func: Callable[[], float] | None = None
) -> WaitFunc:
    """Build a tenacity wait strategy.

    Args:
        config: Retry configuration
        interval_func: Optional callable returning the next interval in
            seconds; overrides the configured strategy. It is called once
            per wait between attempts, never after the final attempt.

    Returns:
        Wait strategy
    """
    if interval_func is not None:

        def wait_interval(retry_state: RetryCallState) -> float:
            if retry_state.attempt_number >= config.max_attempts:
                return 0.0
            return interval_func()

        return wait_interval
    if config.strategy == RetryStrategy.EXPONENTIAL:
        return wait_exponential_jitter(  # type: ignore[no-any-return]
            initial=config.base_delay,
            max=config.max_delay,
            exp_base=config.multiplier,
            jitter=config.base_delay if config.jitter else 0.0,
        )
    return wait_fixed(config.base_delay)  # type: ignore[no-any-return]


class RetryDispatcher(Dispatcher[T]):
    """Retries a dispatcher with a wait between attempts.

    Waits go through the caller's context, so a context that ends while
    waiting stops the retries with the context's own error. A cancellation
    raised by the wrapped dispatcher is never retried.
    """

    def __init__(
        self,
        backend: Dispatcher[T],
        config: RetryConfig | None = None,
        *,
        interval_func: Callable[[], float] | None = None,
        logger: Any | None = None,
        name: str = "retry",
    ):
        """Initialize retrying dispatcher.

        Args:
            backend: Dispatcher to retry
            config: Retry configuration
            interval_func: Optional callable returning each wait in seconds
            logger: Optional structlog logger
            name: Name reported in errors and logs
        """
        self._backend = backend
        self.config = config or RetryConfig()
        self._wait = build_wait(self.config, interval_func)
        self._logger = logger if logger is not None else structlog.get_logger()
        self.name = name

    @property
    def backend(self) -> Dispatcher[T]:
        return self._backend

    async def dispatch(
        self, ctx: DispatchContext, template: str, args: T, *recipients: str
    ) -> None:
        """Dispatch, retrying failures up to ``max_attempts`` times.

        Raises:
            ContextError: The caller's context ended while waiting or
                during the final attempt
            RetryExhaustedException: Every attempt failed
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=self._wait,
            retry=(
                retry_if_exception_type(Exception)
                & retry_if_not_exception_type(ContextCancelledError)
            ),
            sleep=ctx.sleep,
            before_sleep=self._log_retry,
            reraise=False,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    await self._backend.dispatch(ctx, template, args, *recipients)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            ctx_error = ctx.err()
            if ctx_error is not None:
                raise ctx_error from last_error

            self._logger.error(
                "Dispatch failed after all retries",
                retry=self.name,
                max_attempts=self.config.max_attempts,
                error_type=type(last_error).__name__,
                error_message=str(last_error),
            )
            raise RetryExhaustedException(
                self.name, self.config.max_attempts, str(last_error)
            ) from last_error

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else None
        self._logger.warning(
            "Dispatch failed, retrying",
            retry=self.name,
            attempt=retry_state.attempt_number,
            delay=delay,
            error_type=type(error).__name__,
            error_message=str(error),
        )
