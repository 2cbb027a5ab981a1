"""Typing engine package."""

from .keystrokes import CharStatus, TypingEngine, word_start_before
from .performance import (
    PerformanceStats,
    WordAnalysis,
    analyze_words,
    calculate_current_wpm,
    calculate_final_stats,
)

__all__ = [
    "CharStatus",
    "TypingEngine",
    "word_start_before",
    "PerformanceStats",
    "WordAnalysis",
    "analyze_words",
    "calculate_current_wpm",
    "calculate_final_stats",
]
