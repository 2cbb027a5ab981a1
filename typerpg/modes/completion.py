"""What happens when a passage is finished.

Endless
-------
Every finished passage is submitted, earns XP, and a new passage follows.

Daily
-----
::

    incorrect >= 5          -> RETRY       (same difficulty, attempts + 1,
                                            nothing submitted)
    success, < 3 quotes     -> NEXT_QUOTE  (record quote, next difficulty,
                                            attempts reset to 1)
    success, 3rd quote      -> SHOW_MODAL  (record quote, submit ONE
                                            aggregate daily session)

The aggregate daily session carries the rounded average WPM of the three
quotes but the word counts of the final (hard) attempt.  Stored XP values
depend on this mix, so keep it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..engine.performance import PerformanceStats
from ..errors import DailyAlreadyCompletedError
from ..gamification.xp import Mode, calculate_xp_delta
from .daily_progress import DailyProgressState, Difficulty, QUOTES_PER_DAY

logger = logging.getLogger(__name__)

DAILY_FAILURE_THRESHOLD = 5

DIFFICULTY_NAMES: dict[Difficulty, str] = {
    Difficulty.EASY: "Monster",
    Difficulty.MEDIUM: "Mini Boss",
    Difficulty.HARD: "Boss",
}

SubmitSession = Callable[[dict], dict]


class CompletionAction(Enum):
    RETRY = "retry"
    NEXT_QUOTE = "nextQuote"
    SHOW_MODAL = "showModal"
    LOAD_NEW_TEXT = "loadNewText"


@dataclass(frozen=True)
class CompletionContext:
    current_attempts: int
    completed_quotes: int
    has_shown_daily_completion: bool
    current_difficulty: Difficulty

    @classmethod
    def from_progress(
        cls,
        progress: DailyProgressState,
        attempts: int,
        has_shown_daily_completion: bool,
    ) -> "CompletionContext":
        return cls(
            current_attempts=attempts,
            completed_quotes=progress.completed_count,
            has_shown_daily_completion=has_shown_daily_completion,
            current_difficulty=progress.current_difficulty,
        )


@dataclass(frozen=True)
class CompletionResult:
    action: CompletionAction
    message: str = ""
    new_attempts: int | None = None
    xp_delta: int | None = None          # confirmed by the server
    estimated_xp: int | None = None      # local formula, for offline display
    average_wpm: int | None = None
    submitted: bool = False
    error: str | None = None
    time_until_reset_seconds: int | None = None


# ── messages ─────────────────────────────────────────────────────────────


def is_daily_failure(incorrect_words: int) -> bool:
    return incorrect_words >= DAILY_FAILURE_THRESHOLD


def daily_failure_message(incorrect_words: int, difficulty: Difficulty) -> str:
    name = DIFFICULTY_NAMES[difficulty]
    return (
        f"{name} defeated you! {incorrect_words} incorrect words "
        f"(max: {DAILY_FAILURE_THRESHOLD - 1}). Try again!"
    )


def daily_success_message(incorrect_words: int, difficulty: Difficulty) -> str:
    name = DIFFICULTY_NAMES[difficulty]
    if incorrect_words == 0:
        return f"Perfect! {name} defeated with no errors!"
    return f"{name} defeated! {incorrect_words} incorrect words."


def _log_stats(mode: Mode, stats: PerformanceStats) -> None:
    logger.info(
        "%s completion: correct=%d incorrect=%d chars=%d minutes=%.2f wpm=%d",
        mode.value,
        stats.correct_words,
        stats.incorrect_words,
        stats.total_chars_including_spaces,
        stats.elapsed_minutes,
        stats.final_wpm,
    )


# ── submission ───────────────────────────────────────────────────────────


def session_payload(mode: Mode, wpm: int, stats: PerformanceStats) -> dict:
    return {
        "mode": mode.value,
        "wpm": wpm,
        "total_words": stats.total_words,
        "correct_words": stats.correct_words,
        "incorrect_words": stats.incorrect_words,
    }


def _submit(submit: SubmitSession, payload: dict) -> dict:
    """Send *payload*; failures become fields of the returned dict."""
    try:
        response = submit(payload)
    except DailyAlreadyCompletedError as exc:
        logger.info("Daily session rejected: %s", exc.message)
        return {
            "xp_delta": 0,
            "submitted": False,
            "error": exc.reason,
            "time_until_reset_seconds": exc.time_until_reset_seconds,
        }
    except Exception as exc:
        logger.exception("Failed to save %s session", payload["mode"])
        return {"xp_delta": 0, "submitted": False, "error": str(exc) or type(exc).__name__}
    return {"xp_delta": int(response.get("xp_delta", 0)), "submitted": True}


# ── mode handlers ────────────────────────────────────────────────────────


def handle_endless(stats: PerformanceStats, submit: SubmitSession) -> CompletionResult:
    _log_stats(Mode.ENDLESS, stats)
    payload = session_payload(Mode.ENDLESS, stats.final_wpm, stats)
    outcome = _submit(submit, payload)
    xp = outcome["xp_delta"]
    return CompletionResult(
        action=CompletionAction.LOAD_NEW_TEXT,
        message=f"Session completed! +{xp} XP",
        xp_delta=xp,
        estimated_xp=calculate_xp_delta(
            Mode.ENDLESS, stats.incorrect_words, stats.final_wpm,
        ),
        submitted=outcome["submitted"],
        error=outcome.get("error"),
    )


def handle_daily(
    stats: PerformanceStats,
    context: CompletionContext,
    progress: DailyProgressState,
    submit: SubmitSession,
) -> CompletionResult:
    _log_stats(Mode.DAILY, stats)
    difficulty = context.current_difficulty

    if is_daily_failure(stats.incorrect_words):
        message = daily_failure_message(stats.incorrect_words, difficulty)
        logger.info(message)
        return CompletionResult(
            action=CompletionAction.RETRY,
            message=f"Attempt {context.current_attempts + 1} - {message}",
            new_attempts=context.current_attempts + 1,
        )

    message = daily_success_message(stats.incorrect_words, difficulty)
    logger.info(message)
    recorded = progress.complete_quote(stats.final_wpm, context.current_attempts)

    if (
        recorded
        and progress.completed_count >= QUOTES_PER_DAY
        and not context.has_shown_daily_completion
    ):
        average = progress.average_wpm()
        logger.info("Daily challenge completed, average WPM %d", average)
        payload = session_payload(Mode.DAILY, average, stats)
        outcome = _submit(submit, payload)
        return CompletionResult(
            action=CompletionAction.SHOW_MODAL,
            message="Daily challenge completed! Congratulations!",
            xp_delta=outcome["xp_delta"],
            estimated_xp=calculate_xp_delta(
                Mode.DAILY, stats.incorrect_words, average,
            ),
            average_wpm=average,
            submitted=outcome["submitted"],
            error=outcome.get("error"),
            time_until_reset_seconds=outcome.get("time_until_reset_seconds"),
        )

    return CompletionResult(
        action=CompletionAction.NEXT_QUOTE,
        message=f"{difficulty.value} quote completed! Moving to next difficulty.",
        new_attempts=1,
    )


def handle_completion(
    mode: Mode | str,
    stats: PerformanceStats,
    submit: SubmitSession,
    context: CompletionContext | None = None,
    progress: DailyProgressState | None = None,
) -> CompletionResult:
    """Decide the next step for a finished passage.

    Daily mode needs *context* and the day's *progress*, which is updated
    in place on success.
    """
    mode = Mode(mode)
    if mode is Mode.ENDLESS:
        return handle_endless(stats, submit)
    if context is None or progress is None:
        raise ValueError("daily completion needs a context and daily progress")
    return handle_daily(stats, context, progress, submit)
