"""Text-to-speech endpoints backed by Fish Audio."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from voice_platform.api.validation import parse_user_id, read_json_body
from voice_platform.db.database import Database, DatabaseError
from voice_platform.dependencies import get_database, get_fish_audio_client
from voice_platform.models.records import RecordType
from voice_platform.models.synthesis import TTSRequest
from voice_platform.voice.fish_audio import FishAudioClient, FishAudioError

logger = logging.getLogger(__name__)
router = APIRouter()

DEFAULT_VOICE_ID = "default_female_zh"
MAX_TEXT_LENGTH = 5000
MIN_SPEED = 0.5
MAX_SPEED = 2.0


@router.post("")
async def synthesize(
    request: Request,
    db: Database = Depends(get_database),
    fish_audio: FishAudioClient = Depends(get_fish_audio_client),
) -> Response:
    """Convert text to MP3 audio.

    Body: ``{"text": str, "voice_id"?: str, "speed"?: float, "user_id"?: int}``
    """
    body = await read_json_body(request)
    text = body.get("text")
    voice_id = body.get("voice_id") or DEFAULT_VOICE_ID
    speed = body.get("speed", 1.0)
    user_id = parse_user_id(body.get("user_id"))

    if not text or not isinstance(text, str):
        raise HTTPException(
            status_code=400, detail="Text is required and must be a string"
        )

    if len(text) > MAX_TEXT_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Text too long. Maximum {MAX_TEXT_LENGTH} characters allowed",
        )

    if (
        isinstance(speed, bool)
        or not isinstance(speed, (int, float))
        or not MIN_SPEED <= speed <= MAX_SPEED
    ):
        raise HTTPException(
            status_code=400,
            detail=f"Speed must be between {MIN_SPEED} and {MAX_SPEED}",
        )

    logger.info(
        "TTS request: text='%s...' voice_id=%s speed=%s", text[:50], voice_id, speed
    )

    try:
        audio = await fish_audio.text_to_speech(
            TTSRequest(reference_id=voice_id, text=text, speed=speed)
        )
    except FishAudioError as exc:
        logger.error("TTS failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))

    timestamp = int(time.time() * 1000)
    filename = f"tts_{timestamp}_{user_id}.mp3"
    try:
        await db.create_audio_record(
            user_id=user_id,
            filename=filename,
            text_content=text,
            type=RecordType.TTS,
        )
        logger.info("Audio record saved: %s", filename)
    except DatabaseError as exc:
        # The audio is already synthesized; losing the record is acceptable
        logger.error("Failed to save audio record: %s", exc)

    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={
            "Content-Disposition": f'attachment; filename="tts_{timestamp}.mp3"',
            "Cache-Control": "no-cache",
        },
    )


@router.get("")
async def list_voice_models(
    fish_audio: FishAudioClient = Depends(get_fish_audio_client),
) -> dict[str, Any]:
    """Return the voices available for synthesis."""
    models = await fish_audio.get_voice_models()
    return {
        "success": True,
        "models": [model.model_dump() for model in models],
    }


@router.get("/credit")
async def get_credit(
    fish_audio: FishAudioClient = Depends(get_fish_audio_client),
) -> dict[str, Any]:
    """Return the remaining Fish Audio API credit."""
    credit = await fish_audio.get_api_credit()
    response: dict[str, Any] = {"success": credit.error is None, "credits": credit.credits}
    if credit.error:
        response["error"] = credit.error
    return response
