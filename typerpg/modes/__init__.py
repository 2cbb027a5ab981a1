"""Game modes: daily progress, completion policy, passages, controller."""

from .completion import (
    CompletionAction,
    CompletionContext,
    CompletionResult,
    DAILY_FAILURE_THRESHOLD,
    handle_completion,
)
from .controller import GameController
from .daily_progress import (
    DailyProgressState,
    DailyProgressStore,
    Difficulty,
    JsonFileStore,
    MemoryStore,
    QuoteStat,
)
from .texts import generate_text

__all__ = [
    "CompletionAction",
    "CompletionContext",
    "CompletionResult",
    "DAILY_FAILURE_THRESHOLD",
    "handle_completion",
    "GameController",
    "DailyProgressState",
    "DailyProgressStore",
    "Difficulty",
    "JsonFileStore",
    "MemoryStore",
    "QuoteStat",
    "generate_text",
]
