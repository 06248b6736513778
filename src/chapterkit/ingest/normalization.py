"""Text normalisation utilities."""
from __future__ import annotations

import re
import unicodedata

_LINE_BREAK_RE = re.compile(r"\r\n?")
_BOM = "\ufeff"


def normalize_text(text: str) -> str:
    """Normalise line endings and Unicode representation.

    Whitespace inside lines is left untouched; chapter offsets are computed
    against the returned string.
    """

    normalized = text[1:] if text.startswith(_BOM) else text
    normalized = _LINE_BREAK_RE.sub("\n", normalized)
    return unicodedata.normalize("NFC", normalized)
