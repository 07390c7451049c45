"""Dispatch capability.

A dispatcher sends a templated payload to zero or more recipients. Backends
and resilience wrappers share the single ``Dispatcher.dispatch`` coroutine,
and every call carries a ``DispatchContext`` describing the caller's budget.
"""

from .base import Dispatcher
from .context import DispatchContext
from .errors import is_budget_exhausted, is_timeout

__all__ = [
    "Dispatcher",
    "DispatchContext",
    "is_timeout",
    "is_budget_exhausted",
]
