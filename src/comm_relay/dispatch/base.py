"""Dispatch capability shared by backends and resilience wrappers."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .context import DispatchContext

T = TypeVar("T")


class Dispatcher(ABC, Generic[T]):
    """Abstract base class for anything that can dispatch a templated payload.

    Concrete backends (SMS gateways, push services, mail relays) and every
    resilience wrapper implement this one method, so wrappers nest freely.
    """

    @abstractmethod
    async def dispatch(
        self, ctx: DispatchContext, template: str, args: T, *recipients: str
    ) -> None:
        """Send ``template`` rendered with ``args`` to ``recipients``.

        Args:
            ctx: Caller's cancellation and deadline scope
            template: Template name, template id or business key
            args: Template arguments, opaque to wrappers
            *recipients: Zero or more recipient identifiers

        Raises:
            Exception: Any failure; success is a normal return
        """
        pass
