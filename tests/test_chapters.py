from __future__ import annotations

from typing import List

import pytest

from chapterkit.ingest import (
    BoundaryCandidate,
    BoundaryDetector,
    Chapter,
    ChapterBuilder,
    ChapterBuilderConfig,
    TextRange,
)

from conftest import SCENARIO_A


def _assert_full_coverage(chapters: List[Chapter], text: str) -> None:
    assert chapters, "Expected at least one chapter"
    assert chapters[0].start_offset == 0
    assert chapters[-1].end_offset == len(text)
    for current, nxt in zip(chapters, chapters[1:]):
        assert current.end_offset == nxt.start_offset
    for position, chapter in enumerate(chapters):
        assert chapter.index == position
        assert chapter.id == f"chap-{position}"
        assert chapter.content is None
        assert chapter.start_offset < chapter.end_offset


def _build(text: str) -> List[Chapter]:
    return ChapterBuilder().build(text, BoundaryDetector().detect(text))


def test_no_candidates_yields_single_full_text_chapter() -> None:
    text = "没有任何章节标题的一段文字。\n第二行。"

    chapters = _build(text)

    assert len(chapters) == 1
    assert chapters[0].title == "全文"
    assert (chapters[0].start_offset, chapters[0].end_offset) == (0, len(text))


def test_scenario_without_leading_prose() -> None:
    chapters = _build(SCENARIO_A)

    assert [chapter.title for chapter in chapters] == ["第一章 开端", "第二章 发展"]
    assert chapters[0].start_offset == 0
    assert chapters[1].start_offset == SCENARIO_A.index("第二章")
    _assert_full_coverage(chapters, SCENARIO_A)


def test_leading_prose_becomes_beginning_chapter() -> None:
    prose = "x" * 79 + "\n"
    text = prose + "Chapter 1\nfirst body\nChapter 2\nsecond body"

    chapters = _build(text)

    assert [chapter.title for chapter in chapters] == ["开始", "Chapter 1", "Chapter 2"]
    assert (chapters[0].start_offset, chapters[0].end_offset) == (0, 80)
    _assert_full_coverage(chapters, text)


@pytest.mark.parametrize(
    ("first_offset", "expects_leading"),
    [(0, False), (1, False), (50, False), (51, True)],
)
def test_leading_chapter_threshold(first_offset: int, expects_leading: bool) -> None:
    text = "a" * first_offset + "Chapter 1 body" + "b" * 20
    candidates = [BoundaryCandidate(title="Chapter 1", start_offset=first_offset)]

    chapters = ChapterBuilder().build(text, candidates)

    assert len(chapters) == (2 if expects_leading else 1)
    assert chapters[-1].title == "Chapter 1"
    if expects_leading:
        assert chapters[0].end_offset == first_offset
    _assert_full_coverage(chapters, text)


@pytest.mark.parametrize(
    "text",
    [
        "plain text without headings",
        "\n\n第一章 开端\n内容",
        "Chapter 1\nbody",
        "前言\n" + "序" * 100 + "\n第一章\n内容\n第二章\n\n第三章\n",
        "x" * 200 + "\n1. one\n2. two\n3. three",
    ],
)
def test_chapters_cover_text_without_gaps(text: str) -> None:
    _assert_full_coverage(_build(text), text)


def test_labels_and_threshold_are_configurable() -> None:
    builder = ChapterBuilder(
        ChapterBuilderConfig(leading_chapter_threshold=5, leading_chapter_title="Beginning", full_text_title="Full Text")
    )
    text = "intro line\nChapter 1\nbody"

    chapters = builder.build(text, BoundaryDetector().detect(text))

    assert [chapter.title for chapter in chapters] == ["Beginning", "Chapter 1"]
    assert builder.build("nothing", [])[0].title == "Full Text"


def test_text_range_rejects_inverted_offsets() -> None:
    with pytest.raises(ValueError):
        TextRange(10, 5)
    with pytest.raises(ValueError):
        TextRange(-1, 5)
