"""Tests for cool-down recovery."""

import asyncio

import pytest

from comm_relay.dispatch import DispatchContext
from comm_relay.resilience.failover import BackendCursor, CooldownRecovery


class TestCooldownRecovery:
    """Test restoring the preferred backend."""

    def test_rejects_negative_cooldown(self):
        """Test a negative cool-down is rejected."""
        with pytest.raises(ValueError):
            CooldownRecovery(cooldown=-1)

    @pytest.mark.asyncio
    async def test_restores_after_cooldown(self, ctx):
        """Test the cursor is set back once the cool-down passes."""
        cursor = BackendCursor(3, value=2)
        await CooldownRecovery(cooldown=0.01)(ctx, cursor)
        assert cursor.load() == 0

    @pytest.mark.asyncio
    async def test_restores_configured_index(self, ctx):
        """Test a non-default preferred backend is restored."""
        cursor = BackendCursor(3)
        await CooldownRecovery(cooldown=0, recovery_index=2)(ctx, cursor)
        assert cursor.load() == 2

    @pytest.mark.asyncio
    async def test_out_of_range_index_normalizes(self, ctx):
        """Test an out-of-range preferred index selects backend 0."""
        cursor = BackendCursor(2, value=1)
        await CooldownRecovery(cooldown=0, recovery_index=5)(ctx, cursor)
        assert cursor.load() == 0

    @pytest.mark.asyncio
    async def test_cancel_during_cooldown_keeps_cursor(self):
        """Test cancelling the cool-down leaves the cursor alone."""
        ctx = DispatchContext()
        cursor = BackendCursor(2, value=1)
        asyncio.get_running_loop().call_later(0.01, ctx.cancel)

        await CooldownRecovery(cooldown=10)(ctx, cursor)

        assert cursor.load() == 1

    @pytest.mark.asyncio
    async def test_deadline_during_cooldown_keeps_cursor(self):
        """Test a context deadline ends the cool-down without restoring."""
        cursor = BackendCursor(2, value=1)
        await CooldownRecovery(cooldown=10)(DispatchContext.with_timeout(0.01), cursor)
        assert cursor.load() == 1

    def test_repr(self):
        """Test the representation names the settings."""
        assert repr(CooldownRecovery(1.5, 2)) == (
            "CooldownRecovery(cooldown=1.5, recovery_index=2)"
        )
