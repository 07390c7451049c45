"""Failover across redundant dispatch backends.

Two policies share a lock-free backend cursor: round-robin failover sweeps
the backends within one call, and threshold failover switches backend across
calls once consecutive timeouts reach a threshold, optionally restoring the
preferred backend later through a recovery task.
"""

from .config import FailoverConfig, FailoverSettings
from .cursor import AtomicCounter, BackendCursor
from .recovery import CooldownRecovery, RecoveryTask
from .round_robin import RoundRobinFailoverDispatcher
from .threshold import ThresholdFailoverDispatcher

__all__ = [
    "AtomicCounter",
    "BackendCursor",
    "CooldownRecovery",
    "FailoverConfig",
    "FailoverSettings",
    "RecoveryTask",
    "RoundRobinFailoverDispatcher",
    "ThresholdFailoverDispatcher",
]
