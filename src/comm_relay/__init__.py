"""comm-relay: resilient dispatch of templated messages.

Failover, retry and rate limiting wrappers around pluggable dispatch
backends such as SMS gateways, push services and mail relays.
"""

from .dispatch import Dispatcher, DispatchContext
from .resilience import (
    AllBackendsFailedException,
    CooldownRecovery,
    RetryDispatcher,
    RoundRobinFailoverDispatcher,
    ThresholdFailoverDispatcher,
    build_dispatcher,
)

__version__ = "0.1.0"

__all__ = [
    "Dispatcher",
    "DispatchContext",
    "RoundRobinFailoverDispatcher",
    "ThresholdFailoverDispatcher",
    "CooldownRecovery",
    "RetryDispatcher",
    "AllBackendsFailedException",
    "build_dispatcher",
]
