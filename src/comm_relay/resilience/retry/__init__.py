"""Retry with configurable backoff for dispatchers.

Wait strategies (fixed, exponential with jitter, or a caller-supplied
interval function) come from the tenacity library.
"""

from .config import RetryConfig, RetrySettings
from .service import RetryDispatcher, build_wait

__all__ = [
    "RetryConfig",
    "RetrySettings",
    "RetryDispatcher",
    "build_wait",
]
