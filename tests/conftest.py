"""Shared fixtures: sample texts and in-memory DOCX / EPUB documents."""
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import pytest
from docx import Document
from ebooklib import epub

from chapterkit.ingest import IngestPipeline, IngestPipelineConfig

SCENARIO_A = "第一章 开端\n内容A\n第二章 发展\n内容B"


@pytest.fixture()
def pipeline() -> IngestPipeline:
    return IngestPipeline(IngestPipelineConfig(detect_language=False))


@pytest.fixture()
def docx_bytes() -> Callable[[Sequence[Tuple[str, str]]], bytes]:
    """Build a DOCX from ``(kind, text)`` pairs where kind is ``h1`` or ``p``."""

    def _build(parts: Sequence[Tuple[str, str]]) -> bytes:
        document = Document()
        for kind, text in parts:
            if kind == "h1":
                document.add_heading(text, level=1)
            else:
                document.add_paragraph(text)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    return _build


@pytest.fixture()
def epub_bytes(tmp_path: Path) -> Callable[..., bytes]:
    """Build an EPUB whose spine holds one document per ``(heading, body)`` pair."""

    def _build(chapters: Sequence[Tuple[str, str]], title: str = "Sample Book") -> bytes:
        book = epub.EpubBook()
        book.set_identifier("sample-book")
        book.set_title(title)
        book.set_language("en")

        items: List[epub.EpubHtml] = []
        for number, (heading, body) in enumerate(chapters, start=1):
            item = epub.EpubHtml(title=heading, file_name=f"chap_{number:02d}.xhtml", lang="en")
            item.content = f"<html><body><h1>{heading}</h1><p>{body}</p></body></html>"
            book.add_item(item)
            items.append(item)

        book.toc = [epub.Link(item.file_name, item.title, f"chap{number}") for number, item in enumerate(items, 1)]
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = items

        path = tmp_path / "book.epub"
        epub.write_epub(str(path), book)
        return path.read_bytes()

    return _build
