"""Extractors for supported document types.

Plain text is decoded here and segmented by the heuristic stages. DOCX and
EPUB are handed to converters that return already titled content blocks.
"""
from __future__ import annotations

import html
import io
import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple

from bs4 import BeautifulSoup

from .encoding import EncodingSniffer
from .errors import ConversionFailure, ConverterUnavailable, DecodeFailure
from .models import ContentBlock, ConversionResult
from .normalization import normalize_text

LOGGER = logging.getLogger(__name__)

DEFAULT_UNTITLED_TEMPLATE = "第 {number} 章"


@dataclass(slots=True)
class DecodedText:
    text: str
    encoding: str
    diagnostics: List[str] = field(default_factory=list)


class TextExtractor:
    """Decode plaintext documents using a sniffed encoding."""

    def __init__(self, sniffer: Optional[EncodingSniffer] = None) -> None:
        self.sniffer = sniffer or EncodingSniffer()

    def extract(self, data: bytes) -> DecodedText:
        encoding = self.sniffer.sniff_document(data)
        diagnostics: List[str] = []
        try:
            text = self._decode(data, encoding)
        except DecodeFailure as failure:
            message = f"{failure}; invalid byte sequences were replaced"
            LOGGER.warning(message)
            diagnostics.append(message)
            text = data.decode(encoding, errors="replace")
        return DecodedText(text=normalize_text(text), encoding=encoding, diagnostics=diagnostics)

    @staticmethod
    def _decode(data: bytes, encoding: str) -> str:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as exc:
            raise DecodeFailure(encoding, cause=exc) from exc


class DocumentConverter(Protocol):
    """Contract of a structured-format converter collaborator."""

    def convert(self, data: bytes, file_name: str) -> ConversionResult:
        ...


class DocxExtractor:
    """Convert Microsoft Word documents into HTML blocks split at ``Heading 1``."""

    heading_style = "Heading 1"

    def convert(self, data: bytes, file_name: str) -> ConversionResult:
        document = self._load_document(data)
        stem = Path(file_name).stem

        sections: List[Tuple[Optional[str], List[str]]] = [(None, [])]
        for paragraph in document.paragraphs:
            text = paragraph.text
            if self._is_heading(paragraph) and text.strip():
                sections.append((text.strip(), []))
            elif text:
                sections[-1][1].append(text)

        raw_text = "\n".join(
            "\n".join(([title] if title else []) + paragraphs) for title, paragraphs in sections
        ).strip()

        blocks: List[ContentBlock] = []
        headed = len(sections) > 1
        for title, paragraphs in sections:
            if title is None and not paragraphs:
                continue
            if title is None:
                title = stem if headed else file_name
            blocks.append(ContentBlock(title=title, content=_paragraphs_to_html(paragraphs)))

        LOGGER.debug("DOCX %s converted into %s blocks", file_name, len(blocks))
        return ConversionResult(title=stem, blocks=blocks, raw_text=raw_text)

    def _is_heading(self, paragraph) -> bool:
        style = getattr(paragraph, "style", None)
        name = getattr(style, "name", None) or ""
        return name == self.heading_style

    def _load_document(self, data: bytes):
        try:
            from docx import Document as DocxDocument
        except ImportError as error:
            raise ConverterUnavailable("DOCX", cause=error) from error

        try:
            return DocxDocument(io.BytesIO(data))
        except Exception as error:
            raise ConversionFailure(f"python-docx failed to parse DOCX content: {error}", cause=error) from error


class EpubExtractor:
    """Convert EPUB containers into one HTML block per spine document."""

    def __init__(self, untitled_template: str = DEFAULT_UNTITLED_TEMPLATE) -> None:
        self.untitled_template = untitled_template

    def convert(self, data: bytes, file_name: str) -> ConversionResult:
        ebooklib, epub = self._load_library()
        book = self._read_book(epub, data)

        toc_entries = list(_flatten_toc(book.toc))
        result = ConversionResult(title=_book_title(book) or file_name)
        raw_parts: List[str] = []

        for item in self._spine_documents(book, ebooklib):
            number = len(result.blocks) + 1
            href = item.get_name()
            try:
                content, text = self._read_item(item)
            except ConversionFailure as failure:
                message = f"Skipped EPUB item {href}: {failure}"
                LOGGER.warning(message)
                result.diagnostics.append(message)
                continue

            title = _toc_label(toc_entries, href) or self.untitled_template.format(number=number)
            result.blocks.append(ContentBlock(title=title, content=content))
            if text:
                raw_parts.append(text)

        result.raw_text = "\n".join(raw_parts)
        LOGGER.debug("EPUB %s converted into %s blocks", file_name, len(result.blocks))
        return result

    @staticmethod
    def _load_library():
        try:
            import ebooklib
            from ebooklib import epub
        except ImportError as error:
            raise ConverterUnavailable("EPUB", cause=error) from error
        return ebooklib, epub

    @staticmethod
    def _read_book(epub, data: bytes):
        with tempfile.NamedTemporaryFile(suffix=".epub") as src:
            src.write(data)
            src.flush()
            try:
                return epub.read_epub(src.name)
            except Exception as error:
                raise ConversionFailure(f"Could not open EPUB: {error}", cause=error) from error

    @staticmethod
    def _spine_documents(book, ebooklib) -> Iterator:
        for entry in book.spine:
            idref = entry[0] if isinstance(entry, tuple) else entry
            item = book.get_item_with_id(idref)
            if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
                continue
            yield item

    @staticmethod
    def _read_item(item) -> Tuple[str, str]:
        try:
            markup = item.get_content().decode("utf-8", errors="replace")
            soup = BeautifulSoup(markup, "html.parser")
        except Exception as error:
            raise ConversionFailure(str(error), block=item.get_name(), cause=error) from error
        body = soup.find("body")
        if body is not None:
            return body.decode_contents().strip(), body.get_text("\n", strip=True)
        return soup.decode().strip(), soup.get_text("\n", strip=True)


def html_to_text(markup: str) -> str:
    return BeautifulSoup(markup, "html.parser").get_text("\n", strip=True)


def _paragraphs_to_html(paragraphs: Iterable[str]) -> str:
    return "".join(f"<p>{html.escape(paragraph)}</p>" for paragraph in paragraphs)


def _book_title(book) -> Optional[str]:
    try:
        items = book.get_metadata("DC", "title")
    except Exception as error:
        LOGGER.warning("Error extracting EPUB title: %s", error)
        return None
    if items and items[0]:
        title = items[0][0]
        return title.strip() if title and title.strip() else None
    return None


def _flatten_toc(entries) -> Iterator[Tuple[str, str]]:
    """Yield ``(href, label)`` for every navigable table-of-contents entry."""

    for entry in entries or ():
        if isinstance(entry, (tuple, list)):
            section, children = entry[0], entry[1]
            yield from _flatten_toc([section])
            yield from _flatten_toc(children)
            continue
        href = getattr(entry, "href", None) or getattr(entry, "file_name", None)
        label = getattr(entry, "title", None)
        if href and label:
            yield href, label


def _toc_label(entries: List[Tuple[str, str]], href: str) -> Optional[str]:
    for toc_href, label in entries:
        if href in toc_href:
            return label
    return None
