"""Tests for health check endpoint."""

import pytest
from httpx import AsyncClient

from voice_platform.config import settings


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Health endpoint returns 200 with service status."""
    response = await client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "services" in data
    assert data["services"]["database"]["status"] == "healthy"
    assert data["services"]["whisper"]["status"] == "healthy"
    assert "fish_audio" in data["services"]


@pytest.mark.asyncio
async def test_health_degraded_without_fish_audio_token(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "fish_audio_api_token", "")

    data = (await client.get("/api/health")).json()

    assert data["status"] == "degraded"
    assert data["services"]["fish_audio"]["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_health_healthy_when_configured(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "fish_audio_api_token", "token")

    data = (await client.get("/api/health")).json()

    assert data["status"] == "healthy"
