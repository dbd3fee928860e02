"""Tests for the realtime TTS WebSocket relay."""

import pytest
from fastapi.testclient import TestClient

from voice_platform.main import app
from voice_platform.models.synthesis import TTSRequest
from voice_platform.voice.fish_audio import FishAudioError


class FakeRealtimeClient:
    def __init__(self, frames: list[bytes], error: str | None = None) -> None:
        self.frames = frames
        self.error = error
        self.requests: list[TTSRequest] = []

    async def realtime_tts(self, request: TTSRequest):
        self.requests.append(request)
        if self.error:
            raise FishAudioError(self.error)
        for frame in self.frames:
            yield frame


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> FakeRealtimeClient:
    fake = FakeRealtimeClient([b"abc", b"defg"])
    monkeypatch.setattr("voice_platform.api.realtime.get_fish_audio_client", lambda: fake)
    return fake


def test_relays_audio_frames(fake_client: FakeRealtimeClient) -> None:
    client = TestClient(app)

    with client.websocket_connect("/ws/tts") as ws:
        ws.send_json({"text": "你好", "voice_id": "voice_1", "speed": 1.5})

        status = ws.receive_json()
        assert status["type"] == "status"
        assert status["content"] == "Synthesizing..."
        assert "timestamp" in status

        assert ws.receive_bytes() == b"abc"
        assert ws.receive_bytes() == b"defg"

        done = ws.receive_json()
        assert done["type"] == "done"
        assert done["content"] == "7"

    request = fake_client.requests[0]
    assert request.reference_id == "voice_1"
    assert request.text == "你好"
    assert request.speed == 1.5


def test_invalid_messages_keep_connection_open(fake_client: FakeRealtimeClient) -> None:
    client = TestClient(app)

    with client.websocket_connect("/ws/tts") as ws:
        ws.send_text("not json")
        assert ws.receive_json()["content"] == "Invalid JSON"

        ws.send_json({"text": ""})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"text": "hi", "speed": 3})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"text": "hi"})
        assert ws.receive_json()["type"] == "status"

    assert fake_client.requests[0].reference_id == "default_female_zh"


def test_binary_and_non_object_frames_keep_connection_open(
    fake_client: FakeRealtimeClient,
) -> None:
    client = TestClient(app)

    with client.websocket_connect("/ws/tts") as ws:
        ws.send_bytes(b"\x00\x01")
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["content"] == "Expected a JSON text message"

        ws.send_text('["hi"]')
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"text": "hi"})
        assert ws.receive_json()["type"] == "status"


def test_upstream_error_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRealtimeClient([], error="Realtime TTS failed: voice not found")
    monkeypatch.setattr("voice_platform.api.realtime.get_fish_audio_client", lambda: fake)
    client = TestClient(app)

    with client.websocket_connect("/ws/tts") as ws:
        ws.send_json({"text": "hi"})
        assert ws.receive_json()["type"] == "status"

        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["content"] == "Realtime TTS failed: voice not found"


def test_missing_token_closes_connection(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing_token():
        raise FishAudioError("Fish Audio API token is required")

    monkeypatch.setattr("voice_platform.api.realtime.get_fish_audio_client", missing_token)
    client = TestClient(app)

    with client.websocket_connect("/ws/tts") as ws:
        error = ws.receive_json()

    assert error["type"] == "error"
    assert error["content"] == "Fish Audio API token is required"
