"""Document ingestion: encoding sniffing, chapter detection and lazy chapter text."""
from __future__ import annotations

from .boundaries import BoundaryDetector, BoundaryRules, HeadingMatcher, default_matchers
from .chapters import ChapterBuilder, ChapterBuilderConfig
from .encoding import EncodingSniffer
from .errors import (
    ConversionFailure,
    ConverterUnavailable,
    DecodeFailure,
    IngestError,
    UnsupportedFormat,
)
from .extractors import DocumentConverter, DocxExtractor, EpubExtractor, TextExtractor
from .format_detection import DocumentFormat, DocumentFormatDetector
from .materializer import ChapterMaterializer
from .models import (
    BatchReport,
    BoundaryCandidate,
    Chapter,
    ChapterView,
    ContentBlock,
    ConversionResult,
    IngestFailure,
    IngestResult,
    MaterializedBody,
    SourceDocument,
    TextRange,
)
from .pipeline import IngestPipeline, IngestPipelineConfig

__all__ = [
    "BatchReport",
    "BoundaryCandidate",
    "BoundaryDetector",
    "BoundaryRules",
    "Chapter",
    "ChapterBuilder",
    "ChapterBuilderConfig",
    "ChapterMaterializer",
    "ChapterView",
    "ContentBlock",
    "ConversionFailure",
    "ConversionResult",
    "ConverterUnavailable",
    "DecodeFailure",
    "DocumentConverter",
    "DocumentFormat",
    "DocumentFormatDetector",
    "DocxExtractor",
    "EncodingSniffer",
    "EpubExtractor",
    "HeadingMatcher",
    "IngestError",
    "IngestFailure",
    "IngestPipeline",
    "IngestPipelineConfig",
    "IngestResult",
    "MaterializedBody",
    "SourceDocument",
    "TextExtractor",
    "TextRange",
    "default_matchers",
]
