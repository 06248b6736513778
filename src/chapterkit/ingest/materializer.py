"""On-demand materialization of chapter text."""
from __future__ import annotations

import logging
from typing import Optional

from .models import Chapter, ChapterView, MaterializedBody, TextRange

LOGGER = logging.getLogger(__name__)

LOADING_PLACEHOLDER = "正在加载内容..."


class ChapterMaterializer:
    """Produce display text for a chapter.

    This is the only code that slices the retained full text. It never
    mutates the chapter or the buffer, so repeated calls return equal views.
    """

    def __init__(self, placeholder: str = LOADING_PLACEHOLDER) -> None:
        self.placeholder = placeholder

    def materialize(self, chapter: Chapter, full_text: Optional[str]) -> ChapterView:
        body = chapter.body
        if isinstance(body, MaterializedBody):
            return ChapterView(
                chapter_id=chapter.id,
                title=chapter.title,
                content=body.content,
                paragraphs=(body.content,),
            )

        if full_text is None:
            LOGGER.debug("Full text for chapter %s not loaded yet", chapter.id)
            return ChapterView(
                chapter_id=chapter.id,
                title=chapter.title,
                content=self.placeholder,
                paragraphs=(self.placeholder,),
                is_placeholder=True,
            )

        raw = self._slice(body, full_text)
        raw = strip_title_line(raw, chapter.title)
        return ChapterView(
            chapter_id=chapter.id,
            title=chapter.title,
            content=raw,
            paragraphs=tuple(raw.split("\n")),
        )

    @staticmethod
    def _slice(body: TextRange, full_text: str) -> str:
        if body.end > len(full_text):
            raise ValueError(
                f"Chapter range [{body.start}, {body.end}) exceeds text of length {len(full_text)}"
            )
        return full_text[body.start : body.end]


def strip_title_line(raw: str, title: str) -> str:
    """Drop the heading line of ``raw`` when it repeats the chapter title.

    Blank lines before the heading are dropped with it. Exactly one line is
    removed, and only when more text follows it.
    """

    title = title.strip()
    start = 0
    while True:
        newline = raw.find("\n", start)
        if newline == -1:
            return raw
        line = raw[start:newline].strip()
        if line:
            break
        start = newline + 1

    if title and (line in title or title in line):
        return raw[newline + 1 :]
    return raw
