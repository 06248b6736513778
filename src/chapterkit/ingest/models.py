"""Data models used by the ingestion pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .format_detection import DocumentFormat


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw bytes of an uploaded document together with its declared name."""

    data: bytes
    file_name: str
    mime_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MaterializedBody:
    """Chapter text already owned by the chapter (structured formats)."""

    content: str


@dataclass(frozen=True, slots=True)
class TextRange:
    """Half-open character range into a retained full-text buffer."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid text range [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


ChapterBody = Union[MaterializedBody, TextRange]


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter is either materialized content or a lazy range, never both."""

    id: str
    title: str
    index: int
    body: ChapterBody

    @property
    def is_lazy(self) -> bool:
        return isinstance(self.body, TextRange)

    @property
    def content(self) -> Optional[str]:
        if isinstance(self.body, MaterializedBody):
            return self.body.content
        return None

    @property
    def start_offset(self) -> Optional[int]:
        if isinstance(self.body, TextRange):
            return self.body.start
        return None

    @property
    def end_offset(self) -> Optional[int]:
        if isinstance(self.body, TextRange):
            return self.body.end
        return None


@dataclass(frozen=True, slots=True)
class BoundaryCandidate:
    """A heading line accepted by the boundary detector."""

    title: str
    start_offset: int


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """One titled unit of content produced by a structured-format converter."""

    title: str
    content: str


@dataclass(slots=True)
class ConversionResult:
    """Output of a structured-format converter."""

    title: Optional[str]
    blocks: List[ContentBlock] = field(default_factory=list)
    raw_text: str = ""
    diagnostics: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ChapterView:
    """Display form of a chapter produced on demand by the materializer."""

    chapter_id: str
    title: str
    content: str
    paragraphs: Tuple[str, ...]
    is_placeholder: bool = False


@dataclass(slots=True)
class IngestResult:
    """Chapters of one document plus the full text their ranges point into."""

    title: str
    format: DocumentFormat
    chapters: List[Chapter]
    full_text: Optional[str] = None
    encoding: Optional[str] = None
    language: Optional[str] = None
    diagnostics: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class IngestFailure:
    file_name: str
    error: Exception


@dataclass(slots=True)
class BatchReport:
    """Outcome of ingesting several documents one after another."""

    results: List[IngestResult] = field(default_factory=list)
    failures: List[IngestFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.results)
