"""Language detection helpers."""
from __future__ import annotations

import logging
from typing import Optional

from langdetect import DetectorFactory, LangDetectException, detect

LOGGER = logging.getLogger(__name__)


class LanguageDetector:
    """Wraps langdetect, looking only at the beginning of a document.

    langdetect is nondeterministic unless its factory is seeded. The seed is
    process-wide, so it is set here rather than when the module is imported.
    """

    def __init__(self, sample_chars: int = 2000, seed: Optional[int] = 0) -> None:
        self.sample_chars = sample_chars
        if seed is not None:
            DetectorFactory.seed = seed

    def detect(self, text: str) -> Optional[str]:
        cleaned = text[: self.sample_chars].strip()
        if not cleaned:
            return None
        try:
            language = detect(cleaned)
            LOGGER.debug("Detected language: %s", language)
            return language
        except LangDetectException:
            LOGGER.info("Unable to determine language for text of length %s", len(text))
            return None
