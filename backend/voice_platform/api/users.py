"""User and history endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from voice_platform.db.database import Database, DatabaseError
from voice_platform.dependencies import get_database
from voice_platform.models.records import AudioRecord, RecordType, User, VoiceModel

logger = logging.getLogger(__name__)
router = APIRouter()


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)


@router.post("", response_model=User, status_code=201)
async def create_user(
    payload: UserCreate,
    db: Database = Depends(get_database),
) -> User:
    username = payload.username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="Username is required")

    if await db.get_user_by_username(username) is not None:
        raise HTTPException(status_code=409, detail="Username already exists")

    try:
        return await db.create_user(username)
    except DatabaseError as exc:
        logger.error("%s", exc)
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/by-username/{username}", response_model=User)
async def get_user_by_username(
    username: str,
    db: Database = Depends(get_database),
) -> User:
    user = await db.get_user_by_username(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: int,
    db: Database = Depends(get_database),
) -> User:
    return await _require_user(db, user_id)


@router.get("/{user_id}/records", response_model=list[AudioRecord])
async def list_audio_records(
    user_id: int,
    type: Optional[RecordType] = None,
    db: Database = Depends(get_database),
) -> list[AudioRecord]:
    """Return the user's TTS / STT / clone history, newest first."""
    await _require_user(db, user_id)
    return await db.get_audio_records(user_id, type)


@router.get("/{user_id}/voice-models", response_model=list[VoiceModel])
async def list_voice_models(
    user_id: int,
    db: Database = Depends(get_database),
) -> list[VoiceModel]:
    await _require_user(db, user_id)
    return await db.get_voice_models(user_id)


async def _require_user(db: Database, user_id: int) -> User:
    user = await db.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
