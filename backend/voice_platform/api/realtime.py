"""WebSocket endpoint relaying realtime speech synthesis from Fish Audio."""

import json
import logging
from datetime import datetime, timezone

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from voice_platform.dependencies import get_fish_audio_client
from voice_platform.models.synthesis import RealtimeTTSMessage, TTSRequest
from voice_platform.voice.fish_audio import FishAudioError

logger = logging.getLogger(__name__)


async def websocket_tts(websocket: WebSocket) -> None:
    """Handle WebSocket connections for realtime text-to-speech.

    Protocol:
        Client sends JSON: {"text": "...", "voice_id"?: "...", "speed"?: 1.0}
        Server sends binary: audio frames as they arrive from Fish Audio
        Server sends JSON: {"type": "done"|"error"|"status", "content": "...",
                            "timestamp": "..."}
    """
    await websocket.accept()
    logger.info("Realtime TTS WebSocket connected")

    try:
        fish_audio = get_fish_audio_client()
    except FishAudioError as exc:
        await _send_message(websocket, "error", str(exc))
        await websocket.close(code=1011)
        return

    try:
        while True:
            incoming = await websocket.receive()
            if incoming["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(incoming.get("code", 1000))

            raw = incoming.get("text")
            if raw is None:
                await _send_message(websocket, "error", "Expected a JSON text message")
                continue

            try:
                message = RealtimeTTSMessage.model_validate(json.loads(raw))
            except json.JSONDecodeError:
                await _send_message(websocket, "error", "Invalid JSON")
                continue
            except ValidationError as exc:
                await _send_message(websocket, "error", f"Invalid request: {exc}")
                continue

            await _send_message(websocket, "status", "Synthesizing...")
            request = TTSRequest(
                reference_id=message.voice_id,
                text=message.text,
                speed=message.speed,
            )

            total_bytes = 0
            try:
                async for frame in fish_audio.realtime_tts(request):
                    total_bytes += len(frame)
                    await websocket.send_bytes(frame)
            except FishAudioError as exc:
                logger.error("Realtime TTS failed: %s", exc)
                await _send_message(websocket, "error", str(exc))
                continue

            logger.info("Realtime TTS relayed %d bytes", total_bytes)
            await _send_message(websocket, "done", str(total_bytes))

    except WebSocketDisconnect:
        logger.info("Realtime TTS WebSocket disconnected")


async def _send_message(websocket: WebSocket, msg_type: str, content: str) -> None:
    """Send a structured JSON message over the WebSocket."""
    payload = {
        "type": msg_type,
        "content": content,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    await websocket.send_json(payload)
