"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_clock: Controllable monotonic clock for rate-limit windows
    - rate_limiter: Fresh FixedWindowRateLimiter driven by fake_clock
    - fake_agent: Stand-in for AgentService recording forwarded messages
    - app: FastAPI app with rate limiter and agent dependencies overridden
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

import gemini_chat.agent.chat_agent as chat_agent_module
import gemini_chat.api.rate_limit as rate_limit_module
from gemini_chat.agent.chat_agent import get_agent_service
from gemini_chat.api.app import create_app
from gemini_chat.api.rate_limit import FixedWindowRateLimiter, get_rate_limiter
from gemini_chat.models.schemas import ChatMessage


class FakeClock:
    """Monotonic clock whose time only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAgentService:
    """Records every conversation and returns a canned reply."""

    def __init__(self, reply: str = "Hello from Gemini", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[list[ChatMessage]] = []

    async def get_response(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def last_messages(self) -> list[ChatMessage]:
        return self.calls[-1]


@pytest.fixture(autouse=True)
def reset_singletons() -> None:
    """Drop process-wide singletons so tests never share counters or clients."""
    rate_limit_module._rate_limiter = None
    chat_agent_module._agent_service = None


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(fake_clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(limit=30, window_seconds=60.0, clock=fake_clock)


@pytest.fixture
def fake_agent() -> FakeAgentService:
    return FakeAgentService()


@pytest.fixture
def app(rate_limiter: FixedWindowRateLimiter, fake_agent: FakeAgentService) -> FastAPI:
    """Create an app whose rate limiter and agent are test doubles."""
    application = create_app()
    application.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    application.dependency_overrides[get_agent_service] = lambda: fake_agent
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
