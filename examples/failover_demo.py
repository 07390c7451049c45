"""Demonstration of failover across redundant dispatch backends.

This example shows round-robin failover, threshold failover with a
cool-down recovery, and a fully assembled stack with retry and rate
limiting.
"""

import asyncio
import random
from typing import Any

from comm_relay.config import get_settings
from comm_relay.dispatch import Dispatcher, DispatchContext
from comm_relay.domain.models import FailoverPolicy
from comm_relay.observability.logging import correlation_scope
from comm_relay.resilience import (
    AllBackendsFailedException,
    CooldownRecovery,
    FailoverConfig,
    RateLimitConfig,
    RetryConfig,
    RoundRobinFailoverDispatcher,
    ThresholdFailoverDispatcher,
    build_dispatcher,
)


class SimulatedGateway(Dispatcher[dict[str, Any]]):
    """Message gateway that fails or stalls some of the time."""

    def __init__(self, name: str, failure_rate: float = 0.0, slow_rate: float = 0.0):
        self.name = name
        self.failure_rate = failure_rate
        self.slow_rate = slow_rate

    async def dispatch(
        self,
        ctx: DispatchContext,
        template: str,
        args: dict[str, Any],
        *recipients: str,
    ) -> None:
        await asyncio.sleep(0.01)
        if random.random() < self.slow_rate:
            raise TimeoutError(f"{self.name} did not answer in time")
        if random.random() < self.failure_rate:
            raise ConnectionError(f"{self.name} refused the connection")
        print(f"  {self.name}: sent {template!r} to {', '.join(recipients)}")


async def demo_round_robin():
    """Demonstrate round-robin failover."""
    print("\n=== Round-Robin Failover Demo ===")

    failover = RoundRobinFailoverDispatcher(
        [
            SimulatedGateway("primary-sms", failure_rate=0.6),
            SimulatedGateway("backup-sms", failure_rate=0.2),
        ]
    )
    ctx = DispatchContext.with_timeout(5)

    for i in range(5):
        try:
            await failover.dispatch(ctx, "otp", {"code": "1234"}, "+15550100")
        except AllBackendsFailedException as e:
            print(f"  call {i+1} failed: {e}")
        print(f"  preferred backend is now {failover.get_current_index()}")


async def demo_threshold():
    """Demonstrate threshold failover with recovery."""
    print("\n=== Threshold Failover Demo ===")

    failover = ThresholdFailoverDispatcher(
        [
            SimulatedGateway("primary-email", slow_rate=1.0),
            SimulatedGateway("backup-email"),
        ],
        threshold=2,
        recovery=CooldownRecovery(cooldown=0.2),
    )
    ctx = DispatchContext.background()

    for i in range(4):
        try:
            await failover.dispatch(ctx, "welcome", {"name": "Ada"}, "ada@example.com")
        except TimeoutError as e:
            print(f"  call {i+1} timed out: {e}")

    print(f"  active backend: {failover.get_current_index()}")
    await asyncio.sleep(0.3)
    print(f"  active backend after cool-down: {failover.get_current_index()}")
    await failover.aclose()


async def demo_full_stack():
    """Demonstrate retry and rate limiting around failover."""
    print("\n=== Full Stack Demo ===")

    dispatcher = build_dispatcher(
        [
            SimulatedGateway("gateway-a", failure_rate=0.5),
            SimulatedGateway("gateway-b", failure_rate=0.5),
        ],
        FailoverConfig(policy=FailoverPolicy.ROUND_ROBIN),
        retry=RetryConfig(max_attempts=3, base_delay=0.05, max_delay=0.5),
        rate_limit=RateLimitConfig(max_requests=3, window_seconds=1.0),
        rate_limit_key="push",
    )

    for i in range(6):
        with correlation_scope():
            try:
                await dispatcher.dispatch(
                    DispatchContext.with_timeout(2), "alert", {}, f"device-{i}"
                )
            except Exception as e:
                print(f"  call {i+1} failed: {type(e).__name__}: {e}")


async def main():
    """Run all demonstrations."""
    get_settings().setup_logging()
    print("comm-relay failover demonstration")
    print("=" * 50)

    await demo_round_robin()
    await demo_threshold()
    await demo_full_stack()


if __name__ == "__main__":
    asyncio.run(main())
