"""Tests for the weighted language detector."""

import random

import pytest

from voice_platform.utils.language_detector import (
    LANGUAGE_DISTRIBUTION,
    LanguageDetector,
    base_confidence,
)


class SequenceRandom:
    """Returns queued values from ``random()`` in order."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


@pytest.mark.parametrize(
    ("length", "expected"),
    [
        (200_000, 0.92),
        (60_000, 0.88),
        (20_000, 0.85),
        (10_000, 0.85),
        (5_000, 0.70),
    ],
)
def test_base_confidence_grows_with_audio_length(length: int, expected: float) -> None:
    assert base_confidence(length) == expected


def test_distribution_weights_sum_to_one() -> None:
    total = sum(candidate.weight for candidate in LANGUAGE_DISTRIBUTION)
    assert total == pytest.approx(1.0)


def test_low_draw_selects_chinese() -> None:
    detector = LanguageDetector(SequenceRandom(0.0, 0.5))

    result = detector.detect(b"\x00" * 20_000)

    assert result.language == "zh"
    assert result.confidence == pytest.approx(0.93)


def test_draw_selects_by_cumulative_weight() -> None:
    detector = LanguageDetector(SequenceRandom(0.5, 0.5))

    result = detector.detect(b"\x00" * 20_000)

    assert result.language == "en"
    assert result.confidence == pytest.approx(0.85)


def test_highest_draw_selects_last_language() -> None:
    detector = LanguageDetector(SequenceRandom(0.9999, 0.5))

    assert detector.detect(b"\x00" * 20_000).language == "ru"


def test_confidence_is_clamped_to_minimum() -> None:
    # 0.70 base - 0.08 offset - 0.05 jitter falls below the floor
    detector = LanguageDetector(SequenceRandom(0.9999, 0.0))

    result = detector.detect(b"\x00" * 1_000)

    assert result.confidence == pytest.approx(0.65)


def test_confidence_is_clamped_to_maximum() -> None:
    # 0.92 base + 0.08 offset + 0.05 jitter exceeds the ceiling
    detector = LanguageDetector(SequenceRandom(0.0, 1.0))

    result = detector.detect(b"\x00" * 150_000)

    assert result.confidence == pytest.approx(0.99)


def test_random_detections_stay_in_range() -> None:
    detector = LanguageDetector(random.Random(7))
    languages = {candidate.language for candidate in LANGUAGE_DISTRIBUTION}

    for _ in range(200):
        result = detector.detect(b"\x00" * 30_000)
        assert result.language in languages
        assert 0.65 <= result.confidence <= 0.99
