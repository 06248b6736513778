"""Byte-prefix encoding detection."""
from __future__ import annotations

import codecs
import logging

LOGGER = logging.getLogger(__name__)

DEFAULT_SNIFF_BYTES = 4096
DEFAULT_ENCODING = "utf-8"

# Labels whose repertoire is a strict subset of a wider encoding. The sniffed
# prefix may not contain the characters that appear later in the file.
_WIDENED = {
    "ascii": "utf-8",
    "gb2312": "gb18030",
    "gbk": "gb18030",
}


class EncodingSniffer:
    """Guess the text encoding of a document from a bounded byte prefix."""

    def __init__(
        self,
        prefix_bytes: int = DEFAULT_SNIFF_BYTES,
        default: str = DEFAULT_ENCODING,
        min_confidence: float = 0.1,
    ) -> None:
        self.prefix_bytes = prefix_bytes
        self.default = default
        self.min_confidence = min_confidence

    def sniff_document(self, data: bytes) -> str:
        return self.sniff(data[: self.prefix_bytes])

    def sniff(self, prefix: bytes) -> str:
        """Return an encoding label for ``prefix``; never raises."""

        if not prefix:
            return self.default

        try:
            import chardet
        except ImportError:
            LOGGER.warning("chardet is not installed; using %s", self.default)
            return self.default

        guess = chardet.detect(prefix)
        label = guess.get("encoding")
        confidence = guess.get("confidence") or 0.0
        LOGGER.debug("chardet guess %s (confidence %.2f)", label, confidence)
        if not label or confidence < self.min_confidence:
            LOGGER.info("No confident encoding guess; using %s", self.default)
            return self.default

        label = label.lower()
        label = _WIDENED.get(label, label)
        try:
            codecs.lookup(label)
        except LookupError:
            LOGGER.warning("Detected encoding %s is unknown to Python; using %s", label, self.default)
            return self.default
        return label
