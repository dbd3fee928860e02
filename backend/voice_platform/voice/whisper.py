"""Simulated Whisper speech-to-text service.

No model is ever loaded and no audio is decoded. Transcripts are canned
sentences from ``voice.samples`` picked at random for the requested (or
randomly "detected") language, and every step sleeps for a short while so
callers see realistic latencies. ``settings.stt_latency_scale`` scales or
disables those sleeps.

Streaming sessions live in memory, keyed by session id. Each chunk advances
a cursor through a list of canned partial transcripts; the final chunk
produces a full sentence and retires the session shortly after. Sessions
idle for longer than ``settings.stt_session_ttl_minutes`` are swept by
``cleanup_expired_sessions``.
"""

import asyncio
import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, get_args

from voice_platform.config import settings
from voice_platform.models.speech import (
    LanguageDetection,
    ServiceStatus,
    StreamingResult,
    StreamingSessionSummary,
    STTRequest,
    STTResult,
    WhisperModel,
    WhisperModelName,
)
from voice_platform.utils.language_detector import LanguageDetector
from voice_platform.voice.samples import TRANSCRIPT_SAMPLES, streaming_samples

logger = logging.getLogger(__name__)

MODEL_NAMES: tuple[str, ...] = get_args(WhisperModelName)

MODEL_CATALOGUE: dict[str, tuple[str, list[str]]] = {
    "tiny": ("39 MB", ["en", "zh", "ja", "ko"]),
    "base": ("74 MB", ["en", "zh", "ja", "ko", "es", "fr", "de"]),
    "small": ("244 MB", ["en", "zh", "ja", "ko", "es", "fr", "de", "ru"]),
    "medium": ("769 MB", ["99+ languages"]),
    "large": ("1550 MB", ["99+ languages"]),
}

AUTO_LANGUAGE = "auto"
STREAMING_AUTO_LANGUAGE = "zh"

# Simulated latencies, in seconds
MODEL_LOAD_DELAY = 2.0
PREPROCESS_DELAY = 0.1
TRANSCRIBE_DELAY = 1.0
STREAM_CHUNK_DELAY = 0.2

READY_POLL_ATTEMPTS = 30

_SESSION_ID_ALPHABET = string.digits + string.ascii_lowercase


class SessionNotFoundError(KeyError):
    """No streaming session exists for the given id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


@dataclass
class StreamingSession:
    """Server-side state of one streaming transcription."""

    session_id: str
    language: str
    model: str
    created_at: float
    last_activity: float
    chunks: list[bytes] = field(default_factory=list)
    partial_results: list[str] = field(default_factory=list)
    retire_at: Optional[float] = None


def new_session_id() -> str:
    """Return an id like ``session_1700000000000_k3j9x0a2b``."""
    suffix = "".join(random.choices(_SESSION_ID_ALPHABET, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class WhisperService:
    """Speech-to-text backed by canned sample transcripts."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        latency_scale: float | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self._latency_scale = (
            settings.stt_latency_scale if latency_scale is None else latency_scale
        )
        self._language_detector = LanguageDetector(self._rng)
        self._models: dict[str, float] = {}
        self._sessions: dict[str, StreamingSession] = {}
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        logger.info("Initializing Whisper service...")
        self._initialized = True

    async def wait_for_ready(self) -> None:
        """Wait up to 30 seconds for ``initialize()`` to complete."""
        attempts = 0
        while not self._initialized and attempts < READY_POLL_ATTEMPTS:
            await asyncio.sleep(1)
            attempts += 1

        if not self._initialized:
            raise RuntimeError("Whisper service failed to initialize")

    async def cleanup(self) -> None:
        """Unload every model and drop all streaming sessions."""
        logger.info("Cleaning up Whisper service...")
        self._models.clear()
        self._sessions.clear()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------

    async def load_model(self, model_name: str = "base") -> bool:
        await self.wait_for_ready()

        if model_name in self._models:
            logger.debug("Model %s already loaded", model_name)
            return True

        if model_name not in MODEL_CATALOGUE:
            logger.error("Failed to load model %s: unknown model", model_name)
            return False

        logger.info("Loading Whisper model: %s", model_name)
        await self._simulate_latency(MODEL_LOAD_DELAY)
        self._models[model_name] = self._clock()
        logger.info("Model %s loaded successfully", model_name)
        return True

    async def unload_model(self, model_name: str) -> bool:
        if self._models.pop(model_name, None) is None:
            return False
        logger.info("Model %s unloaded", model_name)
        return True

    def get_available_models(self) -> list[WhisperModel]:
        return [
            WhisperModel(
                name=name,
                size=size,
                languages=list(languages),
                loaded=name in self._models,
            )
            for name, (size, languages) in MODEL_CATALOGUE.items()
        ]

    def get_model_info(self, model_name: str) -> WhisperModel | None:
        for model in self.get_available_models():
            if model.name == model_name:
                return model
        return None

    def get_status(self) -> ServiceStatus:
        return ServiceStatus(
            initialized=self._initialized,
            loaded_models=list(self._models),
            memory_usage=f"{len(self._models)} models loaded",
            active_sessions=len(self._sessions),
        )

    # ------------------------------------------------------------------
    # One-shot transcription
    # ------------------------------------------------------------------

    async def speech_to_text(
        self,
        audio: bytes,
        language: str | None = None,
        model: str | None = None,
    ) -> STTResult:
        """Transcribe a complete recording.

        With a known ``language`` the transcript is a sample in that
        language. Otherwise the language is detected first and the
        confidence is discounted accordingly.
        """
        model_name = model or settings.stt_default_model

        if not await self.load_model(model_name):
            return STTResult(success=False, error=f"Failed to load model: {model_name}")

        processed = await self._preprocess(audio)
        started = time.perf_counter()
        logger.info(
            "Transcribing audio with model %s (language=%s)",
            model_name,
            language or "auto-detect",
        )
        await self._simulate_latency(TRANSCRIBE_DELAY)

        if language and language in TRANSCRIPT_SAMPLES:
            text = self._rng.choice(TRANSCRIPT_SAMPLES[language])
            confidence = 0.92 + self._rng.random() * 0.06
        else:
            detected = await self.detect_language(processed)
            language = detected.language
            if language in TRANSCRIPT_SAMPLES:
                text = self._rng.choice(TRANSCRIPT_SAMPLES[language])
                confidence = detected.confidence * (0.85 + self._rng.random() * 0.1)
            else:
                language = "zh"
                text = TRANSCRIPT_SAMPLES["zh"][0]
                confidence = 0.75

        return STTResult(
            success=True,
            text=text,
            confidence=confidence,
            language=language,
            duration=int((time.perf_counter() - started) * 1000),
        )

    async def batch_speech_to_text(self, requests: list[STTRequest]) -> list[STTResult]:
        results = []
        for request in requests:
            results.append(
                await self.speech_to_text(
                    request.audio, language=request.language, model=request.model
                )
            )
        return results

    async def detect_language(self, audio: bytes) -> LanguageDetection:
        await self.wait_for_ready()
        return self._language_detector.detect(audio)

    # ------------------------------------------------------------------
    # Streaming sessions
    # ------------------------------------------------------------------

    async def init_streaming_session(
        self,
        session_id: str,
        language: str = AUTO_LANGUAGE,
        model: str = "base",
    ) -> StreamingSession:
        """Create (or reset) a session after sweeping expired ones."""
        await self.wait_for_ready()
        self.cleanup_expired_sessions()

        now = self._clock()
        session = StreamingSession(
            session_id=session_id,
            language=language or AUTO_LANGUAGE,
            model=model or "base",
            created_at=now,
            last_activity=now,
        )
        self._sessions[session_id] = session
        logger.info(
            "Streaming session created: %s (active sessions: %d)",
            session_id,
            len(self._sessions),
        )
        return session

    async def streaming_speech_to_text(
        self,
        session_id: str,
        audio: bytes,
        is_first_chunk: bool = False,
        is_final_chunk: bool = False,
    ) -> StreamingResult:
        """Buffer one chunk and return the transcript so far.

        Raises:
            SessionNotFoundError: if the session does not exist or was swept.
        """
        await self.wait_for_ready()

        session = self._sessions.get(session_id)
        if session is None:
            logger.error(
                "Session not found: %s (active: %s)", session_id, list(self._sessions)
            )
            raise SessionNotFoundError(session_id)

        session.last_activity = self._clock()
        session.chunks.append(audio)
        logger.debug(
            "Streaming chunk for %s: %d bytes, %d chunks total",
            session_id,
            len(audio),
            len(session.chunks),
        )

        await self._simulate_latency(STREAM_CHUNK_DELAY)

        language = (
            STREAMING_AUTO_LANGUAGE
            if session.language == AUTO_LANGUAGE
            else session.language
        )
        samples = streaming_samples(language)
        text = ""
        is_partial = True
        confidence = 0.85

        if is_first_chunk:
            partial_text = samples["partial"][0]
            session.partial_results = [partial_text]
        elif is_final_chunk:
            text = self._rng.choice(samples["final"])
            partial_text = text
            is_partial = False
            confidence = 0.92 + self._rng.random() * 0.06
            session.retire_at = self._clock() + settings.stt_final_retention_seconds
        else:
            chunk_index = len(session.chunks) - 1
            partial_text = samples["partial"][
                min(chunk_index, len(samples["partial"]) - 1)
            ]
            session.partial_results.append(partial_text)
            confidence = 0.75 + chunk_index * 0.05

        return StreamingResult(
            text=text,
            partial_text=partial_text,
            confidence=min(0.95, confidence),
            language=language,
            is_partial=is_partial,
            is_final=is_final_chunk,
        )

    def cleanup_streaming_session(
        self, session_id: str
    ) -> StreamingSessionSummary | None:
        """Remove a session and summarize it; ``None`` if it was unknown."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        logger.info("Session cleaned up: %s", session_id)
        return StreamingSessionSummary(
            session_id=session_id,
            language=session.language,
            total_chunks=len(session.chunks),
            duration=int((self._clock() - session.created_at) * 1000),
            partial_results=list(session.partial_results),
        )

    def cleanup_expired_sessions(self, now: float | None = None) -> int:
        """Drop idle sessions and finalized sessions past their retention.

        Returns:
            Number of sessions removed.
        """
        now = self._clock() if now is None else now
        ttl = settings.stt_session_ttl_minutes * 60

        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_activity > ttl
            or (session.retire_at is not None and now >= session.retire_at)
        ]
        for session_id in expired:
            del self._sessions[session_id]
            logger.info("Expired session cleaned up: %s", session_id)
        return len(expired)

    def get_session(self, session_id: str) -> StreamingSession | None:
        return self._sessions.get(session_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _preprocess(self, audio: bytes) -> bytes:
        """Placeholder for resampling/format conversion; returns input as is."""
        logger.debug("Processing audio buffer of size: %d bytes", len(audio))
        await self._simulate_latency(PREPROCESS_DELAY)
        return audio

    async def _simulate_latency(self, seconds: float) -> None:
        if self._latency_scale > 0:
            await asyncio.sleep(seconds * self._latency_scale)
