"""Test configuration and fixtures."""

import asyncio
import os
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from comm_relay.config import get_settings
from comm_relay.dispatch import Dispatcher, DispatchContext


class FakeBackend(Dispatcher[Any]):
    """Backend double that records calls and fails on demand.

    ``error`` is raised on every call while set. ``outcomes`` takes
    precedence: each call pops the next entry, and ``None`` means success.
    ``before_raise`` runs just before a failure is raised.
    """

    def __init__(
        self,
        name: str = "backend",
        error: BaseException | None = None,
        outcomes: list[BaseException | None] | None = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.error = error
        self.outcomes = list(outcomes) if outcomes else []
        self.delay = delay
        self.before_raise: Callable[[], None] | None = None
        self.calls: list[tuple[str, Any, tuple[str, ...]]] = []

    async def dispatch(
        self, ctx: DispatchContext, template: str, args: Any, *recipients: str
    ) -> None:
        self.calls.append((template, args, recipients))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.error
        if outcome is not None:
            if self.before_raise is not None:
                self.before_raise()
            raise outcome

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture(scope="session", autouse=True)
def testing_logging():
    """Keep log output quiet during tests."""
    get_settings().setup_logging()


@pytest.fixture
def backend_factory() -> Callable[..., FakeBackend]:
    """Create fake backends."""

    def factory(*args: Any, **kwargs: Any) -> FakeBackend:
        return FakeBackend(*args, **kwargs)

    return factory


@pytest.fixture
def ctx() -> DispatchContext:
    """Create a dispatch context without a deadline."""
    return DispatchContext.background()


@pytest.fixture
def mock_logger():
    """Create a mock structlog logger."""
    return MagicMock()
