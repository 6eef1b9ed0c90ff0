"""
Pytest Configuration and Shared Fixtures

Provides an isolated storage root per test, an in-memory Redis (fakeredis)
for the identity store, and an httpx client bound to a freshly built app.

Run with: pytest tests/ -v
"""

import os

# Settings are read at import time; pin them before any app module loads.
os.environ["APP_ENV"] = "test"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
os.environ["ALLOWED_ORIGIN"] = "http://localhost:3000"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Awaitable, Callable, Dict

import pytest
import pytest_asyncio
from fakeredis import aioredis as fake_aioredis
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from config.settings import Settings, settings
from controller.controller_dependencies import rate_limiter
from main import create_app
from repository.track_storage import TrackStorage


SAMPLE_GPX = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tracklog-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Morning Ride</name>
    <type>cycling</type>
    <trkseg>
      <trkpt lat="46.5000" lon="6.6000"><ele>400.0</ele><time>2024-05-01T07:00:00Z</time></trkpt>
      <trkpt lat="46.5010" lon="6.6010"><ele>410.0</ele><time>2024-05-01T07:01:00Z</time></trkpt>
      <trkpt lat="46.5020" lon="6.6020"><ele>405.0</ele><time>2024-05-01T07:02:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

NAMESPACE_A = "a" * 32
NAMESPACE_B = "b" * 32


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that go through the HTTP app"
    )


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def sample_gpx() -> bytes:
    return SAMPLE_GPX


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return settings.model_copy(update={"STORAGE_ROOT": str(tmp_path / "maps")})


@pytest.fixture
def fake_redis():
    return fake_aioredis.FakeRedis()


@pytest.fixture
def storage(tmp_path) -> TrackStorage:
    return TrackStorage(tmp_path / "maps")


def build_test_app(app_settings: Settings, redis) -> FastAPI:
    application = create_app(app_settings, redis=redis)
    # The limiter needs FastAPILimiter.init, which only runs in the lifespan.
    application.dependency_overrides[rate_limiter] = lambda: None
    return application


@pytest.fixture
def app(test_settings, fake_redis) -> FastAPI:
    return build_test_app(test_settings, fake_redis)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(client) -> Callable[..., Awaitable[Dict[str, str]]]:
    """Register + login; returns Authorization headers for the new user."""

    async def _make(email: str = "rider@example.com", password: str = "correct-horse") -> Dict[str, str]:
        res = await client.post(
            "/api/v1/users/register", json={"email": email, "password": password}
        )
        assert res.status_code == 201, res.text
        res = await client.post(
            "/api/v1/users/login", json={"email": email, "password": password}
        )
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['token']}"}

    return _make


@pytest.fixture
def app_factory() -> Callable[[Settings, object], FastAPI]:
    """For tests that need non-default settings."""
    return build_test_app
