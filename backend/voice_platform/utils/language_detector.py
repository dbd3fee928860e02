"""Simulated spoken-language detection for audio buffers.

There is no acoustic model behind this: the language is drawn from a fixed
distribution weighted towards Chinese, and the confidence grows with the
length of the audio buffer.
"""

import logging
import random
from typing import NamedTuple

from voice_platform.models.speech import LanguageDetection

logger = logging.getLogger(__name__)


class _Candidate(NamedTuple):
    language: str
    weight: float
    confidence_offset: float


# Weights sum to 1.0
LANGUAGE_DISTRIBUTION: tuple[_Candidate, ...] = (
    _Candidate("zh", 0.45, 0.08),
    _Candidate("en", 0.20, 0.0),
    _Candidate("zh-tw", 0.08, 0.05),
    _Candidate("ja", 0.10, -0.02),
    _Candidate("ko", 0.07, -0.03),
    _Candidate("zh-yue", 0.03, 0.02),
    _Candidate("es", 0.03, -0.05),
    _Candidate("fr", 0.02, -0.06),
    _Candidate("de", 0.01, -0.07),
    _Candidate("ru", 0.01, -0.08),
)

FALLBACK_LANGUAGE = "zh"
MIN_CONFIDENCE = 0.65
MAX_CONFIDENCE = 0.99


def base_confidence(audio_length: int) -> float:
    """Longer recordings give more confident detections."""
    if audio_length > 100_000:
        return 0.92
    if audio_length > 50_000:
        return 0.88
    if audio_length < 10_000:
        return 0.70
    return 0.85


class LanguageDetector:
    """Detects the spoken language of an audio buffer by weighted choice."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def detect(self, audio: bytes) -> LanguageDetection:
        """Pick a language for ``audio``.

        Returns:
            LanguageDetection with a confidence clamped to [0.65, 0.99].
        """
        base = base_confidence(len(audio))
        draw = self._rng.random()
        cumulative = 0.0

        for candidate in LANGUAGE_DISTRIBUTION:
            cumulative += candidate.weight
            if draw <= cumulative:
                jitter = (self._rng.random() - 0.5) * 0.1
                confidence = min(
                    MAX_CONFIDENCE,
                    max(MIN_CONFIDENCE, base + candidate.confidence_offset + jitter),
                )
                logger.info(
                    "Detected language: %s (confidence=%.3f)",
                    candidate.language,
                    confidence,
                )
                return LanguageDetection(
                    language=candidate.language, confidence=confidence
                )

        # Float rounding can leave the cumulative weight just below 1.0
        return LanguageDetection(language=FALLBACK_LANGUAGE, confidence=base)
