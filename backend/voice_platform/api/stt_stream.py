"""Streaming speech-to-text session endpoints.

Protocol:
    PUT    {"language"?, "model"?}                 -> opens a session
    POST   {"sessionId", "audioChunk" (base64),
            "isFirstChunk"?, "isFinalChunk"?}      -> partial/final transcript
    DELETE {"sessionId"}                           -> closes the session
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from voice_platform.api.validation import read_json_body
from voice_platform.dependencies import get_whisper_service
from voice_platform.voice.whisper import (
    AUTO_LANGUAGE,
    SessionNotFoundError,
    WhisperService,
    new_session_id,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.put("")
async def start_session(
    request: Request,
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    body = await read_json_body(request)
    language = _text_field(body, "language", AUTO_LANGUAGE)
    model = _text_field(body, "model", "base")
    session_id = new_session_id()

    await whisper.init_streaming_session(session_id, language=language, model=model)

    return {
        "success": True,
        "sessionId": session_id,
        "language": language,
        "model": model,
        "message": "Streaming session initialized",
    }


@router.post("")
async def process_chunk(
    request: Request,
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    body = await read_json_body(request)
    audio_chunk = body.get("audioChunk")
    session_id = body.get("sessionId")
    is_first_chunk = bool(body.get("isFirstChunk"))
    is_final_chunk = bool(body.get("isFinalChunk"))

    if not audio_chunk:
        raise HTTPException(status_code=400, detail="Audio chunk is required")

    if not session_id or not isinstance(session_id, str):
        raise HTTPException(status_code=400, detail="Session ID is required")

    try:
        audio = base64.b64decode(audio_chunk, validate=True)
    except (binascii.Error, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid base64 audio data")

    logger.debug(
        "Streaming chunk: session=%s first=%s final=%s size=%d",
        session_id,
        is_first_chunk,
        is_final_chunk,
        len(audio),
    )

    try:
        result = await whisper.streaming_speech_to_text(
            session_id,
            audio,
            is_first_chunk=is_first_chunk,
            is_final_chunk=is_final_chunk,
        )
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return {
        "success": True,
        "sessionId": session_id,
        "text": result.text,
        "partialText": result.partial_text,
        "confidence": result.confidence,
        "language": result.language,
        "isPartial": result.is_partial,
        "isFinal": result.is_final,
        "timestamp": int(time.time() * 1000),
    }


@router.delete("")
async def end_session(
    request: Request,
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    body = await read_json_body(request)
    session_id = body.get("sessionId")
    if not session_id or not isinstance(session_id, str):
        raise HTTPException(status_code=400, detail="Session ID is required")

    summary = whisper.cleanup_streaming_session(session_id)

    return {
        "success": True,
        "sessionId": session_id,
        "message": "Streaming session ended",
        "finalResult": summary.model_dump(by_alias=True) if summary else None,
    }


def _text_field(body: dict[str, Any], key: str, default: str) -> str:
    value = body.get(key)
    return value if isinstance(value, str) and value else default
