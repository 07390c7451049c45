"""Threshold-driven failover on consecutive timeouts."""

import asyncio
import threading
from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from ...dispatch.base import Dispatcher
from ...dispatch.context import DispatchContext
from ...dispatch.errors import is_timeout
from ...domain.exceptions import ContextError
from .config import FailoverConfig
from .cursor import AtomicCounter, BackendCursor
from .recovery import CooldownRecovery, RecoveryTask

T = TypeVar("T")


class ThresholdFailoverDispatcher(Dispatcher[T]):
    """Switches backend once consecutive timeouts reach a threshold.

    This is a standing policy rather than a per-call sweep: each call goes
    to exactly one backend and its failure is returned to the caller. Only
    timeouts count towards the threshold; success resets the count and any
    other error leaves it alone.

    When a caller sees the count at or above the threshold it moves the
    cursor forward with compare-and-swap. The winner resets the count and
    spawns the recovery task, if one is configured. Every caller that saw the
    breach uses the next backend, whether or not it won the swap.
    """

    def __init__(
        self,
        backends: Sequence[Dispatcher[T]],
        threshold: int,
        recovery: RecoveryTask | None = None,
        logger: Any | None = None,
        name: str = "threshold_failover",
    ):
        """Initialize threshold failover.

        Args:
            backends: Ordered backends, at least one
            threshold: Consecutive timeouts tolerated on the active backend
            recovery: Optional task spawned after each switch, given a fresh
                context and the shared cursor
            logger: Optional structlog logger; observational only
            name: Name reported in logs
        """
        if not backends:
            raise ValueError("at least one backend is required")
        if threshold < 0:
            raise ValueError("threshold must be non-negative")

        self._backends: tuple[Dispatcher[T], ...] = tuple(backends)
        self._threshold = threshold
        self._recovery = recovery
        self._logger = logger if logger is not None else structlog.get_logger()
        self.name = name

        self._cursor = BackendCursor(len(self._backends))
        self._failures = AtomicCounter()

        # Strong references keep detached recovery tasks alive until done.
        self._recovery_tasks: dict[asyncio.Task[None], DispatchContext] = {}
        self._registry_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        backends: Sequence[Dispatcher[T]],
        config: FailoverConfig,
        logger: Any | None = None,
    ) -> "ThresholdFailoverDispatcher[T]":
        """Create threshold failover from configuration."""
        recovery = None
        if config.recovery_enabled:
            recovery = CooldownRecovery(
                cooldown=config.recovery_cooldown,
                recovery_index=config.recovery_index,
            )
        return cls(backends, config.threshold, recovery=recovery, logger=logger)

    @property
    def backends(self) -> tuple[Dispatcher[T], ...]:
        return self._backends

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def consecutive_failures(self) -> int:
        return self._failures.load()

    @property
    def recovery_in_flight(self) -> int:
        with self._registry_lock:
            return len(self._recovery_tasks)

    async def dispatch(
        self, ctx: DispatchContext, template: str, args: T, *recipients: str
    ) -> None:
        """Dispatch through the active backend.

        Raises:
            Exception: The backend's failure, unchanged
        """
        failures = self._failures.load()
        index = self._cursor.load()

        if failures >= self._threshold:
            next_index = (index + 1) % len(self._backends)
            if self._cursor.compare_and_swap(index, next_index):
                self._failures.store(0)
                self._logger.warning(
                    "Timeout threshold reached, switching backend",
                    failover=self.name,
                    previous_index=index,
                    backend_index=next_index,
                    consecutive_failures=failures,
                    threshold=self._threshold,
                )
                self._spawn_recovery()
            index = next_index

        try:
            await self._backends[index].dispatch(ctx, template, args, *recipients)
        except Exception as error:
            if is_timeout(error):
                count = self._failures.add(1)
                self._logger.warning(
                    "Backend dispatch timed out",
                    failover=self.name,
                    backend_index=index,
                    consecutive_failures=count,
                    threshold=self._threshold,
                )
            else:
                self._logger.error(
                    "Backend dispatch failed",
                    failover=self.name,
                    backend_index=index,
                    error_type=type(error).__name__,
                    error_message=str(error),
                )
            raise

        self._failures.store(0)

    def get_current_index(self) -> int:
        """Get the index of the currently active backend."""
        return self._cursor.load()

    def set_current_index(self, index: int) -> None:
        """Force the active backend.

        Out-of-range indexes, negative ones included, select backend 0.
        """
        self._cursor.store(index)
        self._logger.info(
            "Failover index set",
            failover=self.name,
            backend_index=self._cursor.load(),
        )

    def cancel_recovery(self) -> None:
        """Cancel the context of every in-flight recovery task."""
        with self._registry_lock:
            contexts = list(self._recovery_tasks.values())
        for ctx in contexts:
            ctx.cancel()

    async def aclose(self) -> None:
        """Cancel in-flight recovery and wait for it on the running loop."""
        self.cancel_recovery()
        loop = asyncio.get_running_loop()
        with self._registry_lock:
            tasks = [t for t in self._recovery_tasks if t.get_loop() is loop]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn_recovery(self) -> None:
        recovery = self._recovery
        if recovery is None:
            return

        ctx = DispatchContext()
        task = asyncio.get_running_loop().create_task(
            self._run_recovery(recovery, ctx), name=f"{self.name}-recovery"
        )
        with self._registry_lock:
            self._recovery_tasks[task] = ctx
        task.add_done_callback(self._forget_recovery)

    async def _run_recovery(
        self, recovery: RecoveryTask, ctx: DispatchContext
    ) -> None:
        try:
            await recovery(ctx, self._cursor)
        except ContextError:
            self._logger.debug("Backend recovery cancelled", failover=self.name)
        except Exception:
            self._logger.exception("Backend recovery failed", failover=self.name)

    def _forget_recovery(self, task: "asyncio.Task[None]") -> None:
        with self._registry_lock:
            self._recovery_tasks.pop(task, None)
