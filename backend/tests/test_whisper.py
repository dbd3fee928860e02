"""Tests for the simulated Whisper speech-to-text service."""

import re

import pytest

from voice_platform.models.speech import STTRequest
from voice_platform.voice import whisper as whisper_module
from voice_platform.voice.samples import STREAMING_SAMPLES, TRANSCRIPT_SAMPLES
from voice_platform.voice.whisper import (
    SessionNotFoundError,
    WhisperService,
    new_session_id,
)

AUDIO = b"\x00\x01" * 15_000


class TestModels:
    @pytest.mark.asyncio
    async def test_catalogue_lists_every_model(self, whisper: WhisperService) -> None:
        models = whisper.get_available_models()

        assert [m.name for m in models] == ["tiny", "base", "small", "medium", "large"]
        assert not any(m.loaded for m in models)

    @pytest.mark.asyncio
    async def test_load_and_unload_model(self, whisper: WhisperService) -> None:
        assert await whisper.load_model("small") is True
        assert whisper.get_model_info("small").loaded is True

        status = whisper.get_status()
        assert status.loaded_models == ["small"]
        assert status.memory_usage == "1 models loaded"

        assert await whisper.unload_model("small") is True
        assert await whisper.unload_model("small") is False

    @pytest.mark.asyncio
    async def test_unknown_model_fails_to_load(self, whisper: WhisperService) -> None:
        assert await whisper.load_model("huge") is False
        assert whisper.get_model_info("huge") is None

    @pytest.mark.asyncio
    async def test_status_aliases(self, whisper: WhisperService) -> None:
        dumped = whisper.get_status().model_dump(by_alias=True)

        assert set(dumped) == {
            "initialized",
            "loadedModels",
            "memoryUsage",
            "activeSessions",
        }

    @pytest.mark.asyncio
    async def test_not_ready_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(whisper_module, "READY_POLL_ATTEMPTS", 0)
        service = WhisperService(latency_scale=0)

        with pytest.raises(RuntimeError, match="failed to initialize"):
            await service.load_model("base")


class TestSpeechToText:
    @pytest.mark.asyncio
    async def test_known_language(self, whisper: WhisperService) -> None:
        result = await whisper.speech_to_text(AUDIO, language="en")

        assert result.success is True
        assert result.language == "en"
        assert result.text in TRANSCRIPT_SAMPLES["en"]
        assert 0.92 <= result.confidence <= 0.98
        assert result.duration >= 0

    @pytest.mark.asyncio
    async def test_auto_detects_language(self, whisper: WhisperService) -> None:
        result = await whisper.speech_to_text(AUDIO)

        assert result.success is True
        assert result.language in TRANSCRIPT_SAMPLES
        assert result.text in TRANSCRIPT_SAMPLES[result.language]
        assert 0 < result.confidence < 1

    @pytest.mark.asyncio
    async def test_unsupported_language_falls_back_to_detection(
        self, whisper: WhisperService
    ) -> None:
        result = await whisper.speech_to_text(AUDIO, language="xx")

        assert result.success is True
        assert result.language in TRANSCRIPT_SAMPLES

    @pytest.mark.asyncio
    async def test_loads_requested_model(self, whisper: WhisperService) -> None:
        await whisper.speech_to_text(AUDIO, language="zh", model="tiny")

        assert whisper.get_model_info("tiny").loaded is True

    @pytest.mark.asyncio
    async def test_unknown_model_reports_failure(self, whisper: WhisperService) -> None:
        result = await whisper.speech_to_text(AUDIO, model="huge")

        assert result.success is False
        assert result.error == "Failed to load model: huge"

    @pytest.mark.asyncio
    async def test_batch_preserves_order(self, whisper: WhisperService) -> None:
        results = await whisper.batch_speech_to_text(
            [
                STTRequest(audio=AUDIO, language="ja"),
                STTRequest(audio=AUDIO, language="ko"),
            ]
        )

        assert [r.language for r in results] == ["ja", "ko"]

    @pytest.mark.asyncio
    async def test_detect_language(self, whisper: WhisperService) -> None:
        detection = await whisper.detect_language(AUDIO)

        assert 0.65 <= detection.confidence <= 0.99


class TestStreaming:
    def test_session_id_format(self) -> None:
        assert re.fullmatch(r"session_\d+_[0-9a-z]{9}", new_session_id())

    @pytest.mark.asyncio
    async def test_chunk_sequence(self, whisper: WhisperService) -> None:
        await whisper.init_streaming_session("s1")

        first = await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)
        assert first.partial_text == "你好..."
        assert first.text == ""
        assert first.confidence == pytest.approx(0.85)
        assert first.language == "zh"
        assert first.is_partial is True
        assert first.is_final is False

        middle = await whisper.streaming_speech_to_text("s1", b"b")
        assert middle.partial_text == "你好，我是..."
        assert middle.confidence == pytest.approx(0.80)

        final = await whisper.streaming_speech_to_text("s1", b"c", is_final_chunk=True)
        assert final.text in STREAMING_SAMPLES["zh"]["final"]
        assert final.partial_text == final.text
        assert final.is_partial is False
        assert final.is_final is True
        assert 0.92 <= final.confidence <= 0.95

    @pytest.mark.asyncio
    async def test_explicit_language(self, whisper: WhisperService) -> None:
        await whisper.init_streaming_session("s1", language="en")

        result = await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)

        assert result.partial_text == "Hello..."
        assert result.language == "en"

    @pytest.mark.asyncio
    async def test_language_without_samples_uses_chinese_text(
        self, whisper: WhisperService
    ) -> None:
        await whisper.init_streaming_session("s1", language="fr")

        result = await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)

        assert result.partial_text == "你好..."
        assert result.language == "fr"

    @pytest.mark.asyncio
    async def test_partial_confidence_is_capped(self, whisper: WhisperService) -> None:
        await whisper.init_streaming_session("s1")
        await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)

        for _ in range(8):
            result = await whisper.streaming_speech_to_text("s1", b"a")

        assert result.confidence == pytest.approx(0.95)
        assert result.partial_text == STREAMING_SAMPLES["zh"]["partial"][-1]

    @pytest.mark.asyncio
    async def test_unknown_session(self, whisper: WhisperService) -> None:
        with pytest.raises(SessionNotFoundError) as exc_info:
            await whisper.streaming_speech_to_text("missing", b"a")

        assert str(exc_info.value) == "Session not found: missing"

    @pytest.mark.asyncio
    async def test_cleanup_returns_summary(
        self, whisper: WhisperService, clock
    ) -> None:
        await whisper.init_streaming_session("s1", language="en")
        await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)
        await whisper.streaming_speech_to_text("s1", b"b")
        clock.advance(2.5)

        summary = whisper.cleanup_streaming_session("s1")

        assert summary.session_id == "s1"
        assert summary.language == "en"
        assert summary.total_chunks == 2
        assert summary.duration == 2500
        assert summary.partial_results == ["Hello...", "Hello, this is..."]
        assert whisper.get_session("s1") is None
        assert whisper.cleanup_streaming_session("s1") is None

    @pytest.mark.asyncio
    async def test_idle_sessions_expire(
        self, whisper: WhisperService, clock
    ) -> None:
        await whisper.init_streaming_session("old")
        clock.advance(31 * 60)

        # Opening a session sweeps the expired ones first
        await whisper.init_streaming_session("new")

        assert whisper.get_session("old") is None
        assert whisper.get_session("new") is not None

    @pytest.mark.asyncio
    async def test_activity_keeps_session_alive(
        self, whisper: WhisperService, clock
    ) -> None:
        await whisper.init_streaming_session("s1")
        clock.advance(20 * 60)
        await whisper.streaming_speech_to_text("s1", b"a", is_first_chunk=True)
        clock.advance(20 * 60)

        assert whisper.cleanup_expired_sessions() == 0
        assert whisper.get_session("s1") is not None

    @pytest.mark.asyncio
    async def test_finalized_session_is_retired(
        self, whisper: WhisperService, clock
    ) -> None:
        await whisper.init_streaming_session("s1")
        await whisper.streaming_speech_to_text("s1", b"a", is_final_chunk=True)

        clock.advance(4)
        assert whisper.cleanup_expired_sessions() == 0

        clock.advance(1)
        assert whisper.cleanup_expired_sessions() == 1
        assert whisper.get_session("s1") is None

    @pytest.mark.asyncio
    async def test_cleanup_drops_sessions(self, whisper: WhisperService) -> None:
        await whisper.init_streaming_session("s1")
        assert whisper.get_status().active_sessions == 1

        await whisper.cleanup()

        assert whisper.get_session("s1") is None
        assert whisper.is_initialized is False
