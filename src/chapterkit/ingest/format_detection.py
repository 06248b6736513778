"""Utilities for detecting the format of uploaded documents."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import UnsupportedFormat


class DocumentFormat(str, Enum):
    """Supported document formats."""

    TXT = "txt"
    DOCX = "docx"
    EPUB = "epub"

    @property
    def is_structured(self) -> bool:
        return self is not DocumentFormat.TXT


class DocumentFormatDetector:
    """Detects the document format based on file name and optional MIME type."""

    _MIME_MAP = {
        "text/plain": DocumentFormat.TXT,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
        "application/epub+zip": DocumentFormat.EPUB,
    }

    @classmethod
    def accepted(cls) -> tuple[str, ...]:
        return tuple(fmt.value for fmt in DocumentFormat)

    @classmethod
    def detect(cls, file_name: str, mime_type: Optional[str] = None) -> DocumentFormat:
        """Return the detected document format.

        The file suffix decides; an explicit MIME type is only consulted for
        names without a suffix. Anything else raises :class:`UnsupportedFormat`.
        """

        suffix = Path(file_name).suffix.lower().lstrip(".")
        if not suffix and mime_type:
            mime = mime_type.split(";", 1)[0].strip().lower()
            if mime in cls._MIME_MAP:
                return cls._MIME_MAP[mime]

        try:
            return DocumentFormat(suffix)
        except ValueError as exc:
            raise UnsupportedFormat(file_name, cls.accepted()) from exc
