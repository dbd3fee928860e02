"""Speech-to-text endpoints backed by the simulated Whisper service."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from voice_platform.api.validation import (
    ALLOWED_AUDIO_TYPES,
    MB,
    parse_user_id,
    read_audio_upload,
)
from voice_platform.config import settings
from voice_platform.db.database import Database, DatabaseError
from voice_platform.dependencies import get_database, get_whisper_service
from voice_platform.models.records import RecordType
from voice_platform.voice.whisper import MODEL_NAMES, WhisperService

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_FILE_SIZE = 50 * MB


@router.post("")
async def transcribe(
    audio: Optional[UploadFile] = File(None),
    language: Optional[str] = Form(None),
    model: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
    db: Database = Depends(get_database),
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    """Transcribe an uploaded recording."""
    audio_bytes = await read_audio_upload(audio, MAX_FILE_SIZE)
    owner_id = parse_user_id(user_id)
    model_name = model or settings.stt_default_model

    if model_name not in MODEL_NAMES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported model. Available models: {', '.join(MODEL_NAMES)}",
        )

    logger.info(
        "STT request: filename=%s size=%d type=%s language=%s model=%s",
        audio.filename,
        len(audio_bytes),
        audio.content_type,
        language,
        model_name,
    )

    result = await whisper.speech_to_text(
        audio_bytes, language=language or None, model=model_name
    )
    if not result.success:
        logger.error("STT failed: %s", result.error)
        raise HTTPException(
            status_code=500,
            detail=result.error or "Speech-to-text conversion failed",
        )

    filename = f"stt_{int(time.time() * 1000)}_{owner_id}_{audio.filename}"
    try:
        await db.create_audio_record(
            user_id=owner_id,
            filename=filename,
            text_content=result.text or "",
            type=RecordType.STT,
        )
        logger.info("Audio record saved: %s", filename)
    except DatabaseError as exc:
        logger.error("Failed to save audio record: %s", exc)

    return {
        "success": True,
        "text": result.text,
        "confidence": result.confidence,
        "language": result.language,
        "duration": result.duration,
        "model": model_name,
    }


@router.get("")
async def get_stt_info(
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    """Return the model catalogue, service status and upload limits."""
    return {
        "success": True,
        "models": [model.model_dump() for model in whisper.get_available_models()],
        "status": whisper.get_status().model_dump(by_alias=True),
        "supportedFormats": list(ALLOWED_AUDIO_TYPES),
        "maxFileSize": MAX_FILE_SIZE,
    }


@router.put("")
async def detect_language(
    audio: Optional[UploadFile] = File(None),
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    """Detect the spoken language of an uploaded recording."""
    audio_bytes = await read_audio_upload(audio, MAX_FILE_SIZE)
    detection = await whisper.detect_language(audio_bytes)
    return {
        "success": True,
        "language": detection.language,
        "confidence": detection.confidence,
    }
