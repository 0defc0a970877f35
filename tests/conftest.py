"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from agentobs.adapters.sinks.http import NullSinkForwarder
from agentobs.context import ObservabilityContext
from agentobs.core.config import ObservabilityConfig
from agentobs.core.models import MetricSample
from tests.support import NOW, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at NOW until advanced."""
    return FakeClock()


@pytest.fixture
def obs(clock: FakeClock) -> ObservabilityContext:
    """Isolated context with default config, no sinks and a fake clock."""
    return ObservabilityContext(
        ObservabilityConfig(), forwarder=NullSinkForwarder(), clock=clock
    )


@pytest.fixture
def make_sample() -> Callable[..., MetricSample]:
    """Factory fixture for MetricSample objects with sensible defaults.

    Usage:
        sample = make_sample(success=False, error="network timeout")
    """

    def _make(**overrides: Any) -> MetricSample:
        values: dict[str, Any] = {
            "operation": "publish",
            "agent_id": "abraham",
            "actor_id": "trainer-A",
            "timestamp": NOW - 10,
            "duration_ms": 100.0,
            "success": True,
            "error": None,
        }
        values.update(overrides)
        return MetricSample(**values)

    return _make


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
