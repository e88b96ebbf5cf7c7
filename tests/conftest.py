"""Shared pytest fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app


class FakeSource:
    """Response source double that records prompts."""

    def __init__(self, reply: str = "Hello from AI", error: Exception | None = None, available: bool = True):
        self.reply = reply
        self.error = error
        self.available = available
        self.prompts: list[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDateTimeClock:
    """Manually advanced clock returning aware datetimes."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(gemini_api_key="", app_env="development", rate_limit_max_requests=100)


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def client(settings):
    """Client for an app with no AI backend (fallback mode)."""
    app = create_app(settings=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def ai_client(settings, fake_source):
    """Client for an app backed by the fake response source."""
    app = create_app(settings=settings, response_source=fake_source)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dt_clock():
    return FakeDateTimeClock()


@pytest.fixture
def make_source():
    return FakeSource
