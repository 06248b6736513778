"""Heuristic detection of chapter headings in plain text.

Every heading style is an independent :class:`HeadingMatcher`. The detector
walks the text line by line and offers each line, without its leading
whitespace, to the matchers in order; the first one that matches the whole
line produces a candidate. Candidates then go through the validity filter:
a title containing sentence or quotation punctuation is prose, not a heading.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .models import BoundaryCandidate

LOGGER = logging.getLogger(__name__)

ProgressHook = Callable[[int], None]

INVALID_TITLE_CHARS = ",，。？！“”!?\"';"
_CJK_NUMERALS = "0-9零一二三四五六七八九十百千两"


@dataclass(frozen=True, slots=True)
class HeadingMatcher:
    """Matches one heading style at the start of a line."""

    name: str
    pattern: re.Pattern[str]

    @classmethod
    def build(cls, name: str, marker: str, max_trailing_chars: int = 50) -> "HeadingMatcher":
        # Lines never contain "\n", so the trailing class only bounds length.
        compiled = re.compile(rf"(?:{marker})[^\n]{{0,{max_trailing_chars}}}", re.IGNORECASE)
        return cls(name=name, pattern=compiled)

    def match(self, line: str) -> bool:
        return self.pattern.fullmatch(line) is not None


def default_matchers(max_trailing_chars: int = 50) -> Tuple[HeadingMatcher, ...]:
    """Heading styles in the order they are tried."""

    markers = (
        ("cjk_ordinal", rf"第\s*[{_CJK_NUMERALS}]+\s*[章回节卷集部篇]"),
        ("chapter", r"Chapter\s*[\dIVX]+"),
        ("section", r"Section\s*\d+"),
        ("part", r"Part\s*\d+"),
        ("cjk_named", r"序章|前言|引子|尾声|后记|正文|楔子"),
        ("named", r"Prologue|Foreword|Epilogue|Afterword|Interlude"),
        ("numbered", r"[0-9]+\s*\.\s*"),
    )
    return tuple(HeadingMatcher.build(name, marker, max_trailing_chars) for name, marker in markers)


@dataclass(slots=True)
class BoundaryRules:
    max_title_chars: int = 50
    max_trailing_chars: int = 50
    invalid_title_chars: str = INVALID_TITLE_CHARS
    yield_every: int = 100


class BoundaryDetector:
    """Scan decoded text for chapter-heading lines."""

    def __init__(
        self,
        rules: Optional[BoundaryRules] = None,
        matchers: Optional[Sequence[HeadingMatcher]] = None,
    ) -> None:
        self.rules = rules or BoundaryRules()
        self.matchers = tuple(matchers) if matchers is not None else default_matchers(self.rules.max_trailing_chars)
        self._invalid = frozenset(self.rules.invalid_title_chars)

    def detect(self, text: str, on_progress: Optional[ProgressHook] = None) -> List[BoundaryCandidate]:
        """Return accepted heading candidates in text order.

        ``on_progress`` is called with the running candidate count every
        ``rules.yield_every`` candidates so an interactive host can let other
        work run; it has no influence on the result.
        """

        candidates: List[BoundaryCandidate] = []
        yield_every = max(self.rules.yield_every, 1)
        for line_start, line in _iter_lines(text):
            stripped = line.lstrip()
            if not stripped:
                continue
            matcher = self._match(stripped)
            if matcher is None:
                continue
            title = stripped.strip()
            if not self.is_valid_title(title):
                LOGGER.debug("Rejected %s heading %r at %s", matcher.name, title, line_start)
                continue
            start_offset = line_start + (len(line) - len(stripped))
            candidates.append(BoundaryCandidate(title=title, start_offset=start_offset))
            if on_progress is not None and len(candidates) % yield_every == 0:
                on_progress(len(candidates))

        LOGGER.debug("Detected %s chapter boundaries in %s characters", len(candidates), len(text))
        return candidates

    def is_valid_title(self, title: str) -> bool:
        if not title or len(title) > self.rules.max_title_chars:
            return False
        return self._invalid.isdisjoint(title)

    def _match(self, line: str) -> Optional[HeadingMatcher]:
        for matcher in self.matchers:
            if matcher.match(line):
                return matcher
        return None


def _iter_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(offset, line)`` pairs for every ``\\n``-separated line."""

    start = 0
    length = len(text)
    while start <= length:
        end = text.find("\n", start)
        if end == -1:
            end = length
        yield start, text[start:end]
        start = end + 1
