"""Turn boundary candidates into contiguous chapter ranges."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from .models import BoundaryCandidate, Chapter, TextRange

LOGGER = logging.getLogger(__name__)


def chapter_id(index: int) -> str:
    return f"chap-{index}"


@dataclass(slots=True)
class ChapterBuilderConfig:
    leading_chapter_threshold: int = 50
    leading_chapter_title: str = "开始"
    full_text_title: str = "全文"


class ChapterBuilder:
    """Build offset-based chapters that cover the whole text without gaps."""

    def __init__(self, config: ChapterBuilderConfig | None = None) -> None:
        self.config = config or ChapterBuilderConfig()

    def build(self, text: str, candidates: Sequence[BoundaryCandidate]) -> List[Chapter]:
        text_length = len(text)
        if not candidates:
            LOGGER.info("No chapter headings found; using a single chapter")
            return [self._chapter(0, self.config.full_text_title, 0, text_length)]

        chapters: List[Chapter] = []
        first_start = candidates[0].start_offset
        if first_start > self.config.leading_chapter_threshold:
            chapters.append(self._chapter(0, self.config.leading_chapter_title, 0, first_start))
        else:
            # Short leading noise (blank lines, indentation) belongs to the first chapter.
            first_start = 0

        for position, candidate in enumerate(candidates):
            start = first_start if position == 0 else candidate.start_offset
            if position + 1 < len(candidates):
                end = candidates[position + 1].start_offset
            else:
                end = text_length
            chapters.append(self._chapter(len(chapters), candidate.title, start, end))

        LOGGER.debug("Built %s chapters over %s characters", len(chapters), text_length)
        return chapters

    @staticmethod
    def _chapter(index: int, title: str, start: int, end: int) -> Chapter:
        return Chapter(id=chapter_id(index), title=title, index=index, body=TextRange(start, end))
