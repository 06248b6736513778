from __future__ import annotations

from typing import List

import pytest

from chapterkit.ingest import BoundaryCandidate, BoundaryDetector, BoundaryRules, default_matchers

from conftest import SCENARIO_A


def _titles(text: str) -> List[str]:
    return [candidate.title for candidate in BoundaryDetector().detect(text)]


def test_detects_cjk_chapters_with_offsets() -> None:
    candidates = BoundaryDetector().detect(SCENARIO_A)

    assert candidates == [
        BoundaryCandidate(title="第一章 开端", start_offset=0),
        BoundaryCandidate(title="第二章 发展", start_offset=SCENARIO_A.index("第二章")),
    ]


@pytest.mark.parametrize(
    "line",
    [
        "第 1 章 风起",
        "第一百二十三章 终局",
        "第两千零一回",
        "第三卷 江湖",
        "第十二节",
        "Chapter 7 The Storm",
        "CHAPTER IV",
        "chapter 12",
        "Section 3 Methods",
        "Part 2",
        "序章",
        "楔子 夜雨",
        "后记",
        "Prologue",
        "Epilogue: Home",
        "12. The Return",
    ],
)
def test_heading_styles_are_recognised(line: str) -> None:
    assert _titles(f"一些开头的文字\n{line}\n内容") == [line]


def test_candidate_offset_skips_leading_whitespace() -> None:
    text = "开头\n　　第一章 开端  \n内容"

    (candidate,) = BoundaryDetector().detect(text)

    assert candidate.title == "第一章 开端"
    assert candidate.start_offset == text.index("第一章")


def test_heading_must_start_the_line() -> None:
    assert _titles("他翻到了第一章\n然后合上书") == []


@pytest.mark.parametrize(
    "line",
    [
        "第1章，真的吗？",
        "第一章 开端。",
        "Chapter 1, again",
        "Chapter 2 \"Quoted\"",
        "第三章 “引号”",
        "Part 1; Part 2",
        "Chapter 9!",
    ],
)
def test_punctuation_rejects_candidate(line: str) -> None:
    assert _titles(f"{line}\n内容") == []


def test_title_length_limit() -> None:
    accepted = "第一章" + "长" * 47
    rejected = "第一章" + "长" * 48

    assert _titles(f"{accepted}\n内容") == [accepted]
    assert _titles(f"{rejected}\n内容") == []


def test_marker_followed_by_long_line_is_not_a_heading() -> None:
    assert _titles("Chapter 1 " + "x" * 60) == []


def test_candidates_are_in_text_order_and_do_not_overlap() -> None:
    text = "\n".join(f"Chapter {number}\nbody {number}" for number in range(1, 6))

    candidates = BoundaryDetector().detect(text)
    offsets = [candidate.start_offset for candidate in candidates]

    assert [candidate.title for candidate in candidates] == [f"Chapter {n}" for n in range(1, 6)]
    assert offsets == sorted(set(offsets))


def test_progress_hook_does_not_change_results() -> None:
    text = "\n".join(f"第{number}章\n内容" for number in range(1, 251))
    calls: List[int] = []
    detector = BoundaryDetector(BoundaryRules(yield_every=100))

    with_hook = detector.detect(text, on_progress=calls.append)
    without_hook = detector.detect(text)

    assert calls == [100, 200]
    assert with_hook == without_hook
    assert len(with_hook) == 250


def test_matchers_can_be_used_in_isolation() -> None:
    matchers = {matcher.name: matcher for matcher in default_matchers()}

    assert list(matchers) == ["cjk_ordinal", "chapter", "section", "part", "cjk_named", "named", "numbered"]
    assert matchers["cjk_ordinal"].match("第 十 章 标题")
    assert not matchers["cjk_ordinal"].match("Chapter 1")
    assert matchers["numbered"].match("3. Three")
    assert not matchers["numbered"].match("Three.")


def test_custom_rules_change_thresholds() -> None:
    detector = BoundaryDetector(BoundaryRules(max_title_chars=5))

    assert [c.title for c in detector.detect("第一章\n第二章 很长的标题\n")] == ["第一章"]
