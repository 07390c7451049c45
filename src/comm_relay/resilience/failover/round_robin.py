"""Error-driven round-robin failover across redundant backends."""

from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from ...dispatch.base import Dispatcher
from ...dispatch.context import DispatchContext
from ...dispatch.errors import is_budget_exhausted
from ...domain.exceptions import ContextError
from ..exceptions import AllBackendsFailedException
from .cursor import BackendCursor

T = TypeVar("T")


class RoundRobinFailoverDispatcher(Dispatcher[T]):
    """Fails over to the next backend on any non-fatal error.

    Each call sweeps the backends at most once, starting from the shared
    cursor. Every failure that leaves another attempt in the sweep moves the
    cursor one step forward, so later calls start past the backends this call
    found broken. The cursor is a hint: it is not reset on success, nor after
    a sweep in which every backend failed.
    """

    def __init__(
        self,
        backends: Sequence[Dispatcher[T]],
        logger: Any | None = None,
        name: str = "round_robin_failover",
    ):
        """Initialize round-robin failover.

        Args:
            backends: Ordered backends, at least one
            logger: Optional structlog logger; observational only
            name: Name reported in errors and logs
        """
        if not backends:
            raise ValueError("at least one backend is required")
        self._backends: tuple[Dispatcher[T], ...] = tuple(backends)
        self._cursor = BackendCursor(len(self._backends))
        self._logger = logger if logger is not None else structlog.get_logger()
        self.name = name

    @property
    def backends(self) -> tuple[Dispatcher[T], ...]:
        return self._backends

    @property
    def size(self) -> int:
        return len(self._backends)

    async def dispatch(
        self, ctx: DispatchContext, template: str, args: T, *recipients: str
    ) -> None:
        """Dispatch through the first backend that succeeds.

        Raises:
            ContextError: The caller's budget ran out; a context error from
                the backend is raised as received, any other error is
                replaced by the caller's own context error
            AllBackendsFailedException: Every backend failed in this sweep
        """
        size = len(self._backends)
        start = self._cursor.load()
        errors: list[Exception] = []

        for attempt in range(size):
            index = (start + attempt) % size
            try:
                await self._backends[index].dispatch(ctx, template, args, *recipients)
                return
            except Exception as error:
                if is_budget_exhausted(ctx, error):
                    if isinstance(error, ContextError):
                        raise
                    # The caller's context ended mid-call; report its error,
                    # not the backend's.
                    raise ctx.err() from error  # type: ignore[misc]

                errors.append(error)
                self._logger.error(
                    "Dispatch failed, failing over to next backend",
                    failover=self.name,
                    backend_index=index,
                    attempt=attempt + 1,
                    error_type=type(error).__name__,
                    error_message=str(error),
                )
                if attempt < size - 1:
                    self._cursor.advance()

        raise AllBackendsFailedException(self.name, errors) from errors[-1]

    def get_current_index(self) -> int:
        """Get the index of the currently preferred backend."""
        return self._cursor.load()

    def set_current_index(self, index: int) -> None:
        """Force the preferred backend.

        Out-of-range indexes, negative ones included, select backend 0.
        """
        self._cursor.store(index)
        self._logger.info(
            "Failover index set",
            failover=self.name,
            backend_index=self._cursor.load(),
        )
