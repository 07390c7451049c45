"""Cancellation and deadline scope for dispatch calls."""

import asyncio
import threading
import time
import weakref

from ..domain.exceptions import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
)


class DispatchContext:
    """Caller budget for a dispatch: an optional deadline plus cancellation.

    Contexts form a tree. A child inherits its parent's deadline (the earlier
    of the two wins) and is cancelled together with its parent. Once a context
    is done, ``err()`` keeps returning the same exception instance.

    ``cancel()`` may be called from any thread.
    """

    def __init__(
        self, timeout: float | None = None, parent: "DispatchContext | None" = None
    ):
        """Initialize dispatch context.

        Args:
            timeout: Seconds until the deadline, or None for no deadline
            parent: Optional parent context
        """
        self._lock = threading.Lock()
        self._error: ContextError | None = None
        self._children: weakref.WeakSet[DispatchContext] = weakref.WeakSet()
        self._waiters: set[tuple[asyncio.AbstractEventLoop, asyncio.Event]] = set()

        deadline = None if timeout is None else time.monotonic() + max(timeout, 0.0)
        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline
        self._deadline = deadline

        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls) -> "DispatchContext":
        """Create a context that never expires on its own."""
        return cls()

    @classmethod
    def with_timeout(cls, timeout: float) -> "DispatchContext":
        """Create a root context with a deadline ``timeout`` seconds away."""
        return cls(timeout=timeout)

    def child(self, timeout: float | None = None) -> "DispatchContext":
        """Derive a context bounded by this one."""
        return DispatchContext(timeout=timeout, parent=self)

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic()`` clock."""
        return self._deadline

    @property
    def done(self) -> bool:
        return self.err() is not None

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> ContextError | None:
        """Return the reason this context is done, or None while it is live."""
        with self._lock:
            if (
                self._error is None
                and self._deadline is not None
                and time.monotonic() >= self._deadline
            ):
                self._error = ContextDeadlineExceededError()
            return self._error

    def raise_if_done(self) -> None:
        error = self.err()
        if error is not None:
            raise error

    def cancel(self) -> None:
        """Cancel this context and all of its children."""
        if self.err() is not None:
            return
        with self._lock:
            if self._error is not None:
                return
            self._error = ContextCancelledError()
            children = list(self._children)
            waiters = list(self._waiters)

        self._wake(waiters)
        for child in children:
            child.cancel()

    async def sleep(self, delay: float) -> None:
        """Wait ``delay`` seconds unless the context finishes first.

        Raises:
            ContextError: If the context is done before the delay elapses
        """
        self.raise_if_done()

        timeout = max(delay, 0.0)
        remaining = self.remaining()
        bounded_by_deadline = remaining is not None and remaining < timeout
        if bounded_by_deadline:
            timeout = remaining  # type: ignore[assignment]

        event = asyncio.Event()
        waiter = (asyncio.get_running_loop(), event)
        with self._lock:
            if self._error is None:
                self._waiters.add(waiter)
            else:
                event.set()

        try:
            await asyncio.wait_for(event.wait(), timeout)
        except TimeoutError:
            if bounded_by_deadline:
                self._expire()
        finally:
            with self._lock:
                self._waiters.discard(waiter)

        self.raise_if_done()

    def _expire(self) -> None:
        # The loop clock may fire a hair before the deadline.
        with self._lock:
            if self._error is None:
                self._error = ContextDeadlineExceededError()

    def _adopt(self, child: "DispatchContext") -> None:
        with self._lock:
            cancelled = isinstance(self._error, ContextCancelledError)
            if not cancelled:
                self._children.add(child)
        if cancelled:
            child.cancel()

    @staticmethod
    def _wake(waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Event]]) -> None:
        for loop, event in waiters:
            if not loop.is_closed():
                loop.call_soon_threadsafe(event.set)

    def __repr__(self) -> str:
        error = self.err()
        state = "live" if error is None else type(error).__name__
        return f"DispatchContext(state={state}, deadline={self._deadline})"
