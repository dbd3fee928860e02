"""Persisted record models for the SQLite store."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class RecordType(str, Enum):
    """Which feature produced an audio record."""

    TTS = "tts"
    STT = "stt"
    CLONE = "clone"


class ModelStatus(str, Enum):
    """Training status of a cloned voice model."""

    TRAINING = "training"
    READY = "ready"
    FAILED = "failed"


class User(BaseModel):
    """A platform user."""

    id: int
    username: str
    created_at: datetime


class AudioRecord(BaseModel):
    """One TTS / STT / clone operation performed for a user."""

    id: int
    user_id: int
    filename: str
    text_content: Optional[str] = None
    type: RecordType
    created_at: datetime


class VoiceModel(BaseModel):
    """Local metadata for a voice model created by the cloning service."""

    id: int
    user_id: int
    model_id: str
    model_name: str
    status: ModelStatus = ModelStatus.TRAINING
    created_at: datetime
