"""Tests for the health check endpoint."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.app.core.health import reset_health_cache
from src.app.main import create_app

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clear_health_cache():
    """Reset health cache before each test."""
    reset_health_cache()
    yield
    reset_health_cache()


def session_factory(fail: bool = False) -> MagicMock:
    """Stand-in for get_session that optionally fails on connect."""

    @asynccontextmanager
    async def _session():
        if fail:
            raise ConnectionRefusedError("connection refused")
        yield AsyncMock()

    return MagicMock(side_effect=_session)


def engine_client(reachable: bool) -> MagicMock:
    client = MagicMock()
    client.ping = AsyncMock(return_value=reachable)
    return client


async def get_health() -> tuple[int, dict]:
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as client:
        response = await client.get("/health")
    return response.status_code, response.json()


async def test_healthy():
    with (
        patch("src.app.core.health.get_session", session_factory()),
        patch("src.app.core.health.get_engine_client", return_value=engine_client(True)),
    ):
        status_code, data = await get_health()

    assert status_code == 200
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["engine"] == "healthy"
    assert data["cached"] is False


async def test_engine_down_is_degraded():
    """Deliveries can still be logged, so the service keeps taking traffic."""
    with (
        patch("src.app.core.health.get_session", session_factory()),
        patch("src.app.core.health.get_engine_client", return_value=engine_client(False)),
    ):
        status_code, data = await get_health()

    assert status_code == 200
    assert data["status"] == "degraded"
    assert data["engine"] == "unreachable"


async def test_database_down_is_unhealthy():
    with (
        patch("src.app.core.health.get_session", session_factory(fail=True)),
        patch("src.app.core.health.get_engine_client", return_value=engine_client(True)),
    ):
        status_code, data = await get_health()

    assert status_code == 503
    assert data["status"] == "unhealthy"
    assert data["database"].startswith("unhealthy")


async def test_result_is_cached():
    """A second check inside the TTL does not touch the database."""
    session = session_factory()
    with (
        patch("src.app.core.health.get_session", session),
        patch("src.app.core.health.get_engine_client", return_value=engine_client(True)),
    ):
        await get_health()
        status_code, data = await get_health()

    assert status_code == 200
    assert data["cached"] is True
    assert data["cache_age_seconds"] < 10
    assert session.call_count == 1
