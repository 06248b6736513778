"""Exceptions raised while ingesting documents."""
from __future__ import annotations

from typing import Iterable


class IngestError(Exception):
    """Base class for ingestion errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class UnsupportedFormat(IngestError, ValueError):
    """Raised when a document's extension is not one of the accepted formats."""

    def __init__(self, file_name: str, accepted: Iterable[str]) -> None:
        self.file_name = file_name
        self.accepted = tuple(accepted)
        listed = ", ".join(f".{name}" for name in self.accepted)
        super().__init__(f"Unsupported file format: {file_name} (accepted: {listed})")


class ConverterUnavailable(IngestError, RuntimeError):
    """Raised when the converter needed for a structured format cannot be used."""

    def __init__(self, converter: str, *, cause: Exception | None = None) -> None:
        self.converter = converter
        super().__init__(f"{converter} converter is not available", cause=cause)


class DecodeFailure(IngestError):
    """Raised when bytes cannot be decoded strictly with the detected encoding."""

    def __init__(self, encoding: str, *, cause: Exception | None = None) -> None:
        self.encoding = encoding
        super().__init__(f"Could not decode text as {encoding}", cause=cause)


class ConversionFailure(IngestError):
    """Raised by a converter when a content block (or the whole container) cannot be read."""

    def __init__(self, message: str, *, block: str | None = None, cause: Exception | None = None) -> None:
        self.block = block
        super().__init__(message, cause=cause)
