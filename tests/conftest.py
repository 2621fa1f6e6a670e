"""Pytest configuration and shared fixtures."""

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("LOG_FORMAT", "readable")

from whisperlink.core.config import Settings  # noqa: E402
from whisperlink.core.telemetry import reset_metrics  # noqa: E402
from whisperlink.services.secret_store import SecretStore  # noqa: E402


class FakeClock:
    """Manually advanced clock in seconds since the epoch."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SecretStore:
    """Store with a 24h TTL on the fake clock."""
    return SecretStore(24 * 3600, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        rate_limit_requests=1000,
        public_base_url="https://whisper.test",
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    from whisperlink.main import create_app

    reset_metrics()
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def fake_clock_store(client: TestClient, clock: FakeClock) -> SecretStore:
    """Swap the app's store for one driven by the fake clock."""
    s = SecretStore(client.app.state.settings.secret_ttl_seconds, clock=clock)
    client.app.state.secret_store = s
    return s
