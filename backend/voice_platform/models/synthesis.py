"""Models for the Fish Audio text-to-speech and voice cloning service."""

from typing import Optional

from pydantic import BaseModel, Field

from voice_platform.models.records import ModelStatus


class TTSRequest(BaseModel):
    """Payload sent to the Fish Audio TTS endpoint."""

    reference_id: str
    text: str
    speed: float = 1.0
    volume: float = 0
    version: str = "v2"
    cache: bool = False


class VoiceModelInfo(BaseModel):
    """A voice offered by the cloud service."""

    id: str
    name: str
    language: Optional[str] = None
    gender: Optional[str] = None
    description: Optional[str] = None


class CloneResult(BaseModel):
    """Outcome of a voice clone submission.

    ``status`` is passed through from the service and may be outside
    ``ModelStatus``; only known statuses are stored.
    """

    model_id: str
    status: str = ModelStatus.TRAINING.value


class ModelStatusResult(BaseModel):
    """Remote status of a voice model.

    ``status`` is free-form: besides the stored statuses the client reports
    ``unknown`` and ``error`` when the service cannot be asked.
    """

    status: str
    ready: bool = False


class CreditResult(BaseModel):
    """API credit balance."""

    credits: float = 0
    error: Optional[str] = None


class RealtimeTTSMessage(BaseModel):
    """Message received from a realtime TTS WebSocket client."""

    text: str = Field(min_length=1)
    voice_id: str = "default_female_zh"
    speed: float = Field(default=1.0, ge=0.5, le=2.0)
