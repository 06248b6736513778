"""Document ingestion and chapter segmentation for plain text, DOCX and EPUB."""
from __future__ import annotations

from chapterkit.ingest import (
    Chapter,
    ChapterView,
    IngestPipeline,
    IngestPipelineConfig,
    IngestResult,
    SourceDocument,
)

__all__ = [
    "Chapter",
    "ChapterView",
    "IngestPipeline",
    "IngestPipelineConfig",
    "IngestResult",
    "SourceDocument",
]
