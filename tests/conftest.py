"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - config: AppConfig with zero reply delays and a short timeout
    - clock: Controllable clock for deterministic timestamps
    - store: Empty ConversationStore wired to the clock
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from spark_chat.api import app
from spark_chat.config import AppConfig
from spark_chat.conversations.store import ConversationStore


class FakeClock:
    """Clock that advances one second per call unless frozen."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self.step = timedelta(seconds=1)

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def config() -> AppConfig:
    """Return configuration with instant simulated replies.

    Returns:
        AppConfig suitable for fast tests.
    """
    return AppConfig(
        initial_reply_delay=0.0,
        follow_up_reply_delay=0.0,
        reply_timeout=1.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(config: AppConfig, clock: FakeClock) -> ConversationStore:
    """Create an empty conversation store.

    Args:
        config: Test configuration.
        clock: Deterministic clock.

    Returns:
        Empty ConversationStore.
    """
    return ConversationStore(config, clock=clock)


@pytest.fixture
async def async_client() -> AsyncIterator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
