"""Word-level scoring and WPM for a typed passage.

WPM follows the usual convention: five characters make a word, and the
space after a correctly typed word counts as typed throughput.  Only
correct words contribute characters.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from .keystrokes import CharStatus

_WORD_RE = re.compile(r"\S+")

CHARS_PER_WORD = 5
FINISHED_STATUSES = frozenset({CharStatus.CORRECT, CharStatus.LOCKED})
COMMITTED_STATUSES = frozenset({CharStatus.LOCKED})


@dataclass(frozen=True)
class WordAnalysis:
    correct_words: int
    incorrect_words: int
    total_chars_including_spaces: int


@dataclass(frozen=True)
class PerformanceStats:
    correct_words: int
    incorrect_words: int
    total_chars_including_spaces: int
    elapsed_minutes: float
    final_wpm: int

    @property
    def total_words(self) -> int:
        return self.correct_words + self.incorrect_words


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def _count_words(
    text: str, char_status: Sequence[CharStatus], accepted: frozenset,
) -> WordAnalysis:
    correct = incorrect = chars = 0
    for match in _WORD_RE.finditer(text):
        start, end = match.span()
        if all(char_status[i] in accepted for i in range(start, end)):
            correct += 1
            chars += end - start
            if end < len(text) and text[end] == " ":
                chars += 1
        else:
            incorrect += 1
    return WordAnalysis(correct, incorrect, chars)


def analyze_words(text: str, char_status: Sequence[CharStatus]) -> WordAnalysis:
    """Count correct and incorrect words and the characters they contribute.

    A word is correct when every one of its characters is CORRECT or LOCKED.
    """
    return _count_words(text, char_status, FINISHED_STATUSES)


def incorrect_word_count(text: str, char_status: Sequence[CharStatus]) -> int:
    return analyze_words(text, char_status).incorrect_words


def wpm(chars: int, elapsed_minutes: float) -> int:
    if elapsed_minutes <= 0:
        return 0
    return round_half_up(chars / CHARS_PER_WORD / elapsed_minutes)


def calculate_final_stats(
    text: str,
    char_status: Sequence[CharStatus],
    start_time: float | None,
    now: float,
) -> PerformanceStats | None:
    """Score a finished passage.

    *start_time* and *now* are clock readings in seconds.  Returns ``None``
    when typing never started or the passage is empty.
    """
    if start_time is None or not text:
        return None

    elapsed_minutes = (now - start_time) / 60
    analysis = analyze_words(text, char_status)
    return PerformanceStats(
        correct_words=analysis.correct_words,
        incorrect_words=analysis.incorrect_words,
        total_chars_including_spaces=analysis.total_chars_including_spaces,
        elapsed_minutes=elapsed_minutes,
        final_wpm=wpm(analysis.total_chars_including_spaces, elapsed_minutes),
    )


def calculate_current_wpm(
    text: str,
    char_status: Sequence[CharStatus],
    start_time: float | None,
    now: float,
) -> int:
    """Live WPM for display, counting only words committed with space."""
    if start_time is None:
        return 0
    elapsed_minutes = (now - start_time) / 60
    chars = _count_words(
        text, char_status, COMMITTED_STATUSES,
    ).total_chars_including_spaces
    return max(0, wpm(chars, elapsed_minutes))
