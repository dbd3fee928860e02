"""Health check endpoint for infrastructure monitoring."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from voice_platform.config import Settings, get_settings
from voice_platform.db.database import Database
from voice_platform.dependencies import get_database, get_whisper_service
from voice_platform.voice.whisper import WhisperService

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_database(db: Database) -> dict[str, Any]:
    """Run a trivial query against SQLite and return status."""
    if await db.ping():
        return {"status": "healthy"}
    return {"status": "unhealthy", "error": "Database not reachable"}


def _check_whisper(whisper: WhisperService) -> dict[str, Any]:
    """Report whether the speech-to-text service is ready."""
    status = whisper.get_status()
    return {
        "status": "healthy" if status.initialized else "unhealthy",
        "loaded_models": status.loaded_models,
        "active_sessions": status.active_sessions,
    }


def _check_fish_audio(settings: Settings) -> dict[str, Any]:
    """Fish Audio is usable once an API token is configured."""
    if settings.fish_audio_api_token:
        return {"status": "healthy"}
    logger.warning("Fish Audio API token is not configured")
    return {"status": "unhealthy", "error": "API token not configured"}


@router.get("")
async def health_check(
    settings: Settings = Depends(get_settings),
    db: Database = Depends(get_database),
    whisper: WhisperService = Depends(get_whisper_service),
) -> dict[str, Any]:
    """Return aggregate health of all backend services."""
    services = {
        "database": await _check_database(db),
        "whisper": _check_whisper(whisper),
        "fish_audio": _check_fish_audio(settings),
    }

    overall = (
        "healthy"
        if all(s["status"] == "healthy" for s in services.values())
        else "degraded"
    )

    return {
        "status": overall,
        "services": services,
    }
