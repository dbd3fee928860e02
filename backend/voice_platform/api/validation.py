"""Request parsing and validation shared by the API routes."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import HTTPException, Request, UploadFile

from voice_platform.db.database import DEFAULT_USER_ID

logger = logging.getLogger(__name__)

ALLOWED_AUDIO_TYPES = (
    "audio/wav",
    "audio/mp3",
    "audio/mpeg",
    "audio/ogg",
    "audio/webm",
    "audio/m4a",
    "audio/aac",
)

MB = 1024 * 1024


async def read_json_body(request: Request) -> dict[str, Any]:
    """Parse a JSON object body or fail with 400."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Invalid JSON in request body: %s", exc)
        raise HTTPException(status_code=400, detail="Invalid JSON in request body")

    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON in request body")
    return body


async def read_audio_upload(audio: UploadFile | None, max_size: int) -> bytes:
    """Validate an uploaded audio file's type and size and return its bytes."""
    if audio is None:
        raise HTTPException(status_code=400, detail="Audio file is required")

    if audio.content_type not in ALLOWED_AUDIO_TYPES:
        raise HTTPException(
            status_code=400,
            detail=(
                "Unsupported audio format. Allowed types: "
                f"{', '.join(ALLOWED_AUDIO_TYPES)}"
            ),
        )

    data = await audio.read()
    if len(data) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {max_size // MB}MB",
        )
    return data


def parse_user_id(value: Any, default: int = DEFAULT_USER_ID) -> int:
    """Coerce a client-supplied user id, falling back to ``default``."""
    try:
        return int(value) or default
    except (TypeError, ValueError):
        return default
