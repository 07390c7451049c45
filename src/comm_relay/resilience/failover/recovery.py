"""Recovery tasks that restore a preferred backend after a failover."""

from collections.abc import Awaitable, Callable

import structlog

from ...dispatch.context import DispatchContext
from ...domain.exceptions import ContextError
from .cursor import BackendCursor

logger = structlog.get_logger()

# Spawned once per cursor advance with its own context and the shared cursor.
RecoveryTask = Callable[[DispatchContext, BackendCursor], Awaitable[None]]


class CooldownRecovery:
    """Wait out a cool-down, then point the cursor back at a fixed backend.

    The store is unconditional: it does not check which backend is active at
    that moment. Cancelling the context during the cool-down leaves the
    cursor untouched.
    """

    def __init__(self, cooldown: float, recovery_index: int = 0):
        if cooldown < 0:
            raise ValueError("cooldown must be non-negative")
        self.cooldown = cooldown
        self.recovery_index = recovery_index

    async def __call__(self, ctx: DispatchContext, cursor: BackendCursor) -> None:
        try:
            await ctx.sleep(self.cooldown)
        except ContextError as error:
            logger.debug(
                "Backend recovery abandoned",
                reason=type(error).__name__,
                cooldown=self.cooldown,
            )
            return

        previous = cursor.load()
        cursor.store(self.recovery_index)
        logger.info(
            "Restored preferred backend after cool-down",
            previous_index=previous,
            backend_index=cursor.load(),
            cooldown=self.cooldown,
        )

    def __repr__(self) -> str:
        return (
            f"CooldownRecovery(cooldown={self.cooldown}, "
            f"recovery_index={self.recovery_index})"
        )
