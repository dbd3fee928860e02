"""Speech-to-text models for the simulated Whisper service."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

WhisperModelName = Literal["tiny", "base", "small", "medium", "large"]


class WhisperModel(BaseModel):
    """Catalogue entry for a Whisper model size."""

    name: str
    size: str
    languages: list[str]
    loaded: bool = False


class STTRequest(BaseModel):
    """One transcription job."""

    audio: bytes
    language: Optional[str] = None
    model: Optional[str] = None


class STTResult(BaseModel):
    """Result of a one-shot transcription."""

    success: bool
    text: Optional[str] = None
    confidence: Optional[float] = None
    language: Optional[str] = None
    duration: Optional[int] = None
    error: Optional[str] = None


class LanguageDetection(BaseModel):
    """Detected spoken language with a confidence score."""

    language: str
    confidence: float


class StreamingResult(BaseModel):
    """Result of processing one chunk of a streaming session."""

    text: str = ""
    partial_text: str = ""
    confidence: float
    language: str
    is_partial: bool = True
    is_final: bool = False


class StreamingSessionSummary(BaseModel):
    """Summary returned when a streaming session is closed."""

    session_id: str = Field(serialization_alias="sessionId")
    language: str
    total_chunks: int = Field(serialization_alias="totalChunks")
    duration: int
    partial_results: list[str] = Field(serialization_alias="partialResults")


class ServiceStatus(BaseModel):
    """Runtime status of the Whisper service."""

    initialized: bool
    loaded_models: list[str] = Field(serialization_alias="loadedModels")
    memory_usage: str = Field(serialization_alias="memoryUsage")
    active_sessions: int = Field(serialization_alias="activeSessions")
