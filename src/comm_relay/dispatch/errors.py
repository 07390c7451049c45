"""Classification of dispatch failures."""

from ..domain.exceptions import ContextCancelledError, ContextDeadlineExceededError
from .context import DispatchContext


def is_timeout(error: BaseException) -> bool:
    """Check whether an error is a deadline or timeout signal.

    Covers the context's own deadline error as well as builtin
    ``TimeoutError`` (``asyncio.TimeoutError`` is an alias of it).
    """
    return isinstance(error, ContextDeadlineExceededError | TimeoutError)


def is_budget_exhausted(ctx: DispatchContext, error: BaseException) -> bool:
    """Check whether a failure means the caller's budget is spent.

    True once the caller's own context is done, or when the backend reports
    a cancellation. A deadline error raised by a backend's internal context
    while the caller's context is still live does not count.
    """
    if ctx.err() is not None:
        return True
    return isinstance(error, ContextCancelledError)
