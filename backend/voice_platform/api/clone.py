"""Voice cloning endpoints: submit samples, track and delete voice models."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from voice_platform.api.validation import MB, parse_user_id, read_audio_upload
from voice_platform.db.database import DEFAULT_USER_ID, Database, DatabaseError
from voice_platform.dependencies import get_database, get_fish_audio_client
from voice_platform.models.records import ModelStatus, RecordType, VoiceModel
from voice_platform.voice.fish_audio import FishAudioClient, FishAudioError

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_FILE_SIZE = 100 * MB
MAX_MODEL_NAME_LENGTH = 100

_STORED_STATUSES = {status.value for status in ModelStatus}


@router.post("")
async def clone_voice(
    audio: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
    db: Database = Depends(get_database),
    fish_audio: FishAudioClient = Depends(get_fish_audio_client),
) -> dict[str, Any]:
    """Upload a voice sample and register the resulting voice model."""
    if audio is None:
        raise HTTPException(status_code=400, detail="Audio file is required")

    model_name = (name or "").strip()
    if not model_name:
        raise HTTPException(status_code=400, detail="Model name is required")

    if len(model_name) > MAX_MODEL_NAME_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=(
                "Model name too long. Maximum "
                f"{MAX_MODEL_NAME_LENGTH} characters allowed"
            ),
        )

    audio_bytes = await read_audio_upload(audio, MAX_FILE_SIZE)
    owner_id = parse_user_id(user_id)

    logger.info(
        "Voice clone request: filename=%s size=%d type=%s name=%s user_id=%d",
        audio.filename,
        len(audio_bytes),
        audio.content_type,
        model_name,
        owner_id,
    )

    try:
        result = await fish_audio.clone_voice(
            audio_bytes,
            name=model_name,
            description=description.strip() if description else None,
            filename=audio.filename or "voice_sample.wav",
            content_type=audio.content_type or "audio/wav",
        )
    except FishAudioError as exc:
        logger.error("Voice clone failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))

    response: dict[str, Any] = {
        "success": True,
        "model_id": result.model_id,
        "model_name": model_name,
        "status": result.status,
    }

    try:
        voice_model = await db.create_voice_model(
            user_id=owner_id,
            model_id=result.model_id,
            model_name=model_name,
            status=result.status,
        )
        await db.create_audio_record(
            user_id=owner_id,
            filename=f"clone_{int(time.time() * 1000)}_{owner_id}_{audio.filename}",
            text_content=f"Voice clone model: {model_name}",
            type=RecordType.CLONE,
        )
    except DatabaseError as exc:
        # Training already started remotely, so report success anyway
        logger.error("Failed to save voice model record: %s", exc)
        response["message"] = (
            "Voice cloning initiated successfully (database save failed)"
        )
        response["warning"] = "Failed to save record to database"
        return response

    logger.info("Voice model record saved: id=%d", voice_model.id)
    response["message"] = "Voice cloning initiated successfully"
    response["database_id"] = voice_model.id
    return response


@router.get("")
async def get_voice_models(
    user_id: int = DEFAULT_USER_ID,
    model_id: Optional[str] = None,
    db: Database = Depends(get_database),
    fish_audio: FishAudioClient = Depends(get_fish_audio_client),
) -> dict[str, Any]:
    """Check one model's status, or list a user's models with fresh statuses."""
    if model_id:
        return await _check_single_model(db, fish_audio, user_id, model_id)

    try:
        models = await db.get_voice_models(user_id)
    except DatabaseError as exc:
        logger.error("Failed to get voice models: %s", exc)
        raise HTTPException(
            status_code=500, detail="Failed to get voice models from database"
        )

    refreshed = await asyncio.gather(
        *(_refresh_model(db, fish_audio, model) for model in models)
    )
    return {"success": True, "models": refreshed, "total": len(refreshed)}


@router.delete("")
async def delete_voice_model(
    user_id: int = DEFAULT_USER_ID,
    model_id: Optional[str] = None,
    id: int = 0,
    db: Database = Depends(get_database),
) -> dict[str, Any]:
    """Delete a voice model record by database id or remote model id."""
    if not model_id and not id:
        raise HTTPException(
            status_code=400, detail="Model ID or database ID is required"
        )

    try:
        model = await db.get_voice_model(user_id, id=id or None, model_id=model_id)
        if model is None:
            raise HTTPException(status_code=404, detail="Voice model not found")
        await db.delete_voice_model(model.id)
    except DatabaseError as exc:
        logger.error("Failed to delete voice model: %s", exc)
        raise HTTPException(
            status_code=500, detail="Failed to delete voice model from database"
        )

    logger.info("Voice model deleted: %s", model.model_id)
    return {
        "success": True,
        "message": "Voice model deleted successfully",
        "deleted_model": {
            "id": model.id,
            "model_id": model.model_id,
            "model_name": model.model_name,
        },
    }


async def _check_single_model(
    db: Database,
    fish_audio: FishAudioClient,
    user_id: int,
    model_id: str,
) -> dict[str, Any]:
    remote = await fish_audio.check_model_status(model_id)
    response: dict[str, Any] = {
        "success": True,
        "model_id": model_id,
        "status": remote.status,
        "ready": remote.ready,
    }

    try:
        model = await db.get_voice_model(user_id, model_id=model_id)
        if model is not None and _needs_sync(model, remote.status):
            await db.update_voice_model_status(model.id, remote.status)
            model.status = ModelStatus(remote.status)
    except DatabaseError as exc:
        logger.error("Database error when checking model status: %s", exc)
        return response

    response["model_info"] = model.model_dump(mode="json") if model else None
    return response


async def _refresh_model(
    db: Database,
    fish_audio: FishAudioClient,
    model: VoiceModel,
) -> dict[str, Any]:
    """Sync one stored model with the remote status."""
    remote = await fish_audio.check_model_status(model.model_id)
    last_checked = datetime.now(timezone.utc).isoformat()

    if remote.status not in _STORED_STATUSES:
        logger.error(
            "Failed to check status for model %s: %s", model.model_id, remote.status
        )
        return {
            **model.model_dump(mode="json"),
            "ready": model.status == ModelStatus.READY,
            "last_checked": last_checked,
            "error": "Failed to check status",
        }

    if _needs_sync(model, remote.status):
        try:
            await db.update_voice_model_status(model.id, remote.status)
        except DatabaseError as exc:
            logger.error("Failed to update status for model %s: %s", model.model_id, exc)
            return {
                **model.model_dump(mode="json"),
                "ready": model.status == ModelStatus.READY,
                "last_checked": last_checked,
                "error": "Failed to check status",
            }
        model.status = ModelStatus(remote.status)

    return {
        **model.model_dump(mode="json"),
        "ready": remote.ready,
        "last_checked": last_checked,
    }


def _needs_sync(model: VoiceModel, remote_status: str) -> bool:
    return remote_status in _STORED_STATUSES and remote_status != model.status.value
