"""Shared test fixtures for the voice platform backend."""

import json
import random
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from voice_platform.db.database import Database
from voice_platform.dependencies import (
    get_database,
    get_fish_audio_client,
    get_whisper_service,
)
from voice_platform.main import app
from voice_platform.voice.fish_audio import FishAudioClient
from voice_platform.voice.whisper import WhisperService

FISH_AUDIO_BASE_URL = "https://fish.test/api/open"


class FakeClock:
    """Monotonic clock the tests can move forward by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFishAudio:
    """In-process stand-in for the Fish Audio REST API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.tts_audio = b"ID3fake-mp3-bytes"
        self.tts_status = 200
        self.models_status = 200
        self.models: list[dict[str, Any]] = [
            {
                "id": "remote_voice",
                "name": "Remote Voice",
                "language": "en-US",
                "gender": "female",
            }
        ]
        self.clone_status = 200
        self.clone_response: dict[str, Any] = {
            "model_id": "model_abc",
            "status": "training",
        }
        self.model_statuses: dict[str, str] = {}
        self.credits = 42
        # Canned (status, body) by path, served before the default routing
        self.raw_responses: dict[str, tuple[int, str]] = {}

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/open")
        if path in self.raw_responses:
            status, body = self.raw_responses[path]
            return httpx.Response(status, text=body)

        if path == "/tts" and request.method == "POST":
            if self.tts_status != 200:
                return httpx.Response(self.tts_status, text="quota exceeded")
            return httpx.Response(200, content=self.tts_audio)

        if path == "/models":
            if self.models_status != 200:
                return httpx.Response(self.models_status)
            return httpx.Response(200, json={"data": self.models})

        if path == "/clone" and request.method == "POST":
            if self.clone_status != 200:
                return httpx.Response(self.clone_status, text="bad sample")
            return httpx.Response(200, json=self.clone_response)

        if path.startswith("/model/") and path.endswith("/status"):
            model_id = path.split("/")[2]
            if model_id not in self.model_statuses:
                return httpx.Response(404)
            return httpx.Response(200, json={"status": self.model_statuses[model_id]})

        if path == "/wallet/credit":
            return httpx.Response(200, json={"credits": self.credits})

        return httpx.Response(404)

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_fish_audio() -> FakeFishAudio:
    return FakeFishAudio()


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """SQLite store on a temporary file."""
    db = Database(str(tmp_path / "voice_clone_test.db"))
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def whisper(clock: FakeClock) -> AsyncGenerator[WhisperService, None]:
    """Deterministic Whisper service without simulated latency."""
    service = WhisperService(rng=random.Random(1234), clock=clock, latency_scale=0)
    await service.initialize()
    yield service
    await service.cleanup()


@pytest_asyncio.fixture
async def fish_audio(
    fake_fish_audio: FakeFishAudio,
) -> AsyncGenerator[FishAudioClient, None]:
    client = FishAudioClient(
        api_token="test-token",
        base_url=FISH_AUDIO_BASE_URL,
        transport=httpx.MockTransport(fake_fish_audio.handle),
    )
    await client.initialize()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def client(
    database: Database,
    whisper: WhisperService,
    fish_audio: FishAudioClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_database] = lambda: database
    app.dependency_overrides[get_whisper_service] = lambda: whisper
    app.dependency_overrides[get_fish_audio_client] = lambda: fish_audio

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
