"""High level ingestion pipeline entry point."""
from __future__ import annotations

import html
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from chapterkit.logging_config import get_ingest_audit_logger

from .boundaries import INVALID_TITLE_CHARS, BoundaryDetector, BoundaryRules, ProgressHook
from .chapters import ChapterBuilder, ChapterBuilderConfig, chapter_id
from .encoding import DEFAULT_ENCODING, DEFAULT_SNIFF_BYTES, EncodingSniffer
from .errors import ConversionFailure, ConverterUnavailable, UnsupportedFormat
from .extractors import (
    DEFAULT_UNTITLED_TEMPLATE,
    DocumentConverter,
    DocxExtractor,
    EpubExtractor,
    TextExtractor,
    html_to_text,
)
from .format_detection import DocumentFormat, DocumentFormatDetector
from .language import LanguageDetector
from .materializer import ChapterMaterializer
from .models import (
    BatchReport,
    Chapter,
    ChapterView,
    ConversionResult,
    IngestFailure,
    IngestResult,
    MaterializedBody,
    SourceDocument,
)

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "CHAPTERKIT_"


@dataclass(slots=True)
class IngestPipelineConfig:
    sniff_bytes: int = DEFAULT_SNIFF_BYTES
    default_encoding: str = DEFAULT_ENCODING
    min_encoding_confidence: float = 0.1
    max_title_chars: int = 50
    max_trailing_chars: int = 50
    invalid_title_chars: str = INVALID_TITLE_CHARS
    yield_every: int = 100
    leading_chapter_threshold: int = 50
    leading_chapter_title: str = "开始"
    full_text_title: str = "全文"
    untitled_chapter_template: str = DEFAULT_UNTITLED_TEMPLATE
    detect_language: bool = False
    language_sample_chars: int = 2000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IngestPipelineConfig":
        """Build a config, overriding defaults with ``CHAPTERKIT_*`` variables."""

        environ = os.environ if environ is None else environ
        overrides: Dict[str, object] = {}
        for spec in fields(cls):
            name = ENV_PREFIX + spec.name.upper()
            raw = environ.get(name)
            if raw is None:
                continue
            try:
                overrides[spec.name] = _coerce(raw, type(spec.default))
            except ValueError as exc:
                raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
        return cls(**overrides)


def _coerce(raw: str, kind: type) -> object:
    if kind is bool:
        value = raw.strip().lower()
        if value in {"1", "true", "yes", "on"}:
            return True
        if value in {"0", "false", "no", "off"}:
            return False
        raise ValueError(raw)
    if kind in (int, float):
        return kind(raw.strip())
    return raw


class IngestPipeline:
    """Route documents to the heuristic or the converter path and normalise the result."""

    def __init__(
        self,
        config: Optional[IngestPipelineConfig] = None,
        converters: Optional[Mapping[DocumentFormat, DocumentConverter]] = None,
    ) -> None:
        self.config = config or IngestPipelineConfig()
        self.text_extractor = TextExtractor(
            EncodingSniffer(
                prefix_bytes=self.config.sniff_bytes,
                default=self.config.default_encoding,
                min_confidence=self.config.min_encoding_confidence,
            )
        )
        self.detector = BoundaryDetector(
            BoundaryRules(
                max_title_chars=self.config.max_title_chars,
                max_trailing_chars=self.config.max_trailing_chars,
                invalid_title_chars=self.config.invalid_title_chars,
                yield_every=self.config.yield_every,
            )
        )
        self.builder = ChapterBuilder(
            ChapterBuilderConfig(
                leading_chapter_threshold=self.config.leading_chapter_threshold,
                leading_chapter_title=self.config.leading_chapter_title,
                full_text_title=self.config.full_text_title,
            )
        )
        self.converters: Dict[DocumentFormat, DocumentConverter] = {
            DocumentFormat.DOCX: DocxExtractor(),
            DocumentFormat.EPUB: EpubExtractor(self.config.untitled_chapter_template),
        }
        if converters:
            self.converters.update(converters)
        self.materializer = ChapterMaterializer()
        self.language_detector: Optional[LanguageDetector] = None
        if self.config.detect_language:
            self.language_detector = LanguageDetector(self.config.language_sample_chars)
        self.audit_logger = get_ingest_audit_logger()

    def ingest(
        self,
        file_bytes: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
        on_progress: Optional[ProgressHook] = None,
    ) -> IngestResult:
        """Split an uploaded file into chapters.

        Only :class:`UnsupportedFormat` and :class:`ConverterUnavailable`
        escape; every other problem is recovered from and reported in
        ``IngestResult.diagnostics``.
        """

        document_format = DocumentFormatDetector.detect(file_name, mime_type)
        LOGGER.info("Processing file %s (%s)", file_name, document_format.value)

        if document_format is DocumentFormat.TXT:
            result = self._ingest_text(file_bytes, file_name, on_progress)
        else:
            result = self._ingest_structured(file_bytes, file_name, document_format)

        LOGGER.info("Generated %s chapters for file %s", len(result.chapters), file_name)
        self.audit_logger.info(
            {
                "event": "ingest",
                "file_name": file_name,
                "format": document_format.value,
                "chapters": len(result.chapters),
                "encoding": result.encoding,
                "language": result.language,
                "diagnostics": list(result.diagnostics),
            }
        )
        return result

    def iter_ingest(self, documents: Iterable[SourceDocument]) -> Iterator[IngestResult | IngestFailure]:
        """Ingest documents strictly one after another.

        Each item is either the result or the failure for one document, so a
        consumer may stop iterating at any point without holding the text of
        more than one document.
        """

        for document in documents:
            try:
                yield self.ingest(document.data, document.file_name, document.mime_type)
            except (UnsupportedFormat, ConverterUnavailable) as error:
                LOGGER.warning("Failed to ingest %s: %s", document.file_name, error)
                self.audit_logger.info(
                    {"event": "ingest_failed", "file_name": document.file_name, "error": str(error)}
                )
                yield IngestFailure(file_name=document.file_name, error=error)

    def ingest_many(self, documents: Iterable[SourceDocument]) -> BatchReport:
        report = BatchReport()
        for outcome in self.iter_ingest(documents):
            if isinstance(outcome, IngestFailure):
                report.failures.append(outcome)
            else:
                report.results.append(outcome)
        LOGGER.info("Batch finished: %s succeeded, %s failed", report.succeeded, len(report.failures))
        return report

    def materialize(self, result: IngestResult, index: int) -> ChapterView:
        return self.materializer.materialize(result.chapters[index], result.full_text)

    # plain text ---------------------------------------------------------
    def _ingest_text(self, file_bytes: bytes, file_name: str, on_progress: Optional[ProgressHook]) -> IngestResult:
        decoded = self.text_extractor.extract(file_bytes)
        LOGGER.debug("Decoded %s as %s", file_name, decoded.encoding)
        candidates = self.detector.detect(decoded.text, on_progress=on_progress)
        chapters = self.builder.build(decoded.text, candidates)
        diagnostics = list(decoded.diagnostics)
        if not candidates:
            diagnostics.append(f"No chapter headings found in {file_name}; showing the full text as one chapter")
        return IngestResult(
            title=Path(file_name).stem,
            format=DocumentFormat.TXT,
            chapters=chapters,
            full_text=decoded.text,
            encoding=decoded.encoding,
            language=self._language(decoded.text),
            diagnostics=diagnostics,
        )

    # structured formats -------------------------------------------------
    def _ingest_structured(self, file_bytes: bytes, file_name: str, document_format: DocumentFormat) -> IngestResult:
        converter = self.converters.get(document_format)
        if converter is None:
            raise ConverterUnavailable(document_format.value.upper())

        try:
            conversion = converter.convert(file_bytes, file_name)
        except ConversionFailure as failure:
            LOGGER.warning("Conversion of %s failed: %s", file_name, failure)
            conversion = ConversionResult(title=None, diagnostics=[str(failure)])

        diagnostics = list(conversion.diagnostics)
        chapters = [
            Chapter(id=chapter_id(index), title=block.title, index=index, body=MaterializedBody(block.content))
            for index, block in enumerate(conversion.blocks)
        ]
        if not chapters:
            chapters = [self._fallback_chapter(file_name, conversion, diagnostics)]

        sample = "\n".join(html_to_text(chapter.content or "") for chapter in chapters[:3])
        return IngestResult(
            title=conversion.title or Path(file_name).stem,
            format=document_format,
            chapters=chapters,
            language=self._language(sample),
            diagnostics=diagnostics,
        )

    def _fallback_chapter(self, file_name: str, conversion: ConversionResult, diagnostics: List[str]) -> Chapter:
        if conversion.raw_text.strip():
            message = f"No content blocks could be read from {file_name}; showing its raw text"
            content = "".join(f"<p>{html.escape(line)}</p>" for line in conversion.raw_text.split("\n"))
        else:
            message = f"No readable content could be extracted from {file_name}"
            content = f"<p>{html.escape(message)}</p>"
        LOGGER.warning(message)
        diagnostics.append(message)
        return Chapter(id=chapter_id(0), title=Path(file_name).stem, index=0, body=MaterializedBody(content))

    def _language(self, text: str) -> Optional[str]:
        if self.language_detector is None:
            return None
        return self.language_detector.detect(text)
