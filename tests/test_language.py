from __future__ import annotations

import pytest
from langdetect import DetectorFactory

from chapterkit.ingest import IngestPipeline
from chapterkit.ingest.language import LanguageDetector


def test_detects_english() -> None:
    text = "This is a reasonably long English sentence about a traveller who walks across the country."

    assert LanguageDetector().detect(text) == "en"


def test_blank_text_has_no_language() -> None:
    assert LanguageDetector().detect("   \n ") is None


def test_text_without_features_has_no_language() -> None:
    assert LanguageDetector().detect("12345 67890") is None


def test_only_the_sample_is_inspected() -> None:
    detector = LanguageDetector(sample_chars=3)

    assert detector.detect("   " + "This sentence is never looked at.") is None


def test_seed_is_set_only_by_an_enabled_detector(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(DetectorFactory, "seed", None)

    pipeline = IngestPipeline()

    assert pipeline.language_detector is None
    assert DetectorFactory.seed is None

    LanguageDetector()

    assert DetectorFactory.seed == 0


def test_seed_can_be_left_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(DetectorFactory, "seed", 7)

    LanguageDetector(seed=None)

    assert DetectorFactory.seed == 7
