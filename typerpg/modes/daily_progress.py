"""Per-day progress through the three-quote daily challenge.

The state lives in a small key-value store under
``daily_progress_<YYYY-MM-DD>`` (UTC date), so a new calendar day starts
from a clean slate automatically.  The server's "completed today" flag is
authoritative; this cache only tracks the quotes in between.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Protocol

from ..engine.performance import round_half_up
from ..gamification.daily import (
    seconds_until_reset, utc_date_string, utc_now,
)

logger = logging.getLogger(__name__)

KEY_PREFIX = "daily_progress_"
QUOTES_PER_DAY = 3


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def next(self) -> "Difficulty":
        """The following difficulty; HARD stays HARD."""
        order = list(Difficulty)
        idx = order.index(self)
        return order[min(idx + 1, len(order) - 1)]


@dataclass(frozen=True)
class QuoteStat:
    difficulty: Difficulty
    wpm: int
    attempts: int


@dataclass
class DailyProgressState:
    current_difficulty: Difficulty = Difficulty.EASY
    completed_count: int = 0
    is_completed: bool = False
    last_completion_date: str = ""
    quote_stats: list[QuoteStat] = field(default_factory=list)

    # ── queries ───────────────────────────────────────────────────────

    def has_completed(self, difficulty: Difficulty) -> bool:
        return any(s.difficulty == difficulty for s in self.quote_stats)

    def average_wpm(self) -> int:
        """Rounded mean WPM of the recorded quotes, 0 when none."""
        if not self.quote_stats:
            return 0
        total = sum(s.wpm for s in self.quote_stats)
        return round_half_up(total / len(self.quote_stats))

    # ── mutation ──────────────────────────────────────────────────────

    def complete_quote(
        self, wpm: int, attempts: int, now: datetime | None = None,
    ) -> bool:
        """Record the current difficulty and advance.

        Returns ``False`` (and changes nothing) if that difficulty was
        already recorded today.
        """
        difficulty = self.current_difficulty
        if self.has_completed(difficulty):
            logger.warning(
                "Quote difficulty %s already completed, skipping duplicate",
                difficulty.value,
            )
            return False

        self.quote_stats.append(QuoteStat(difficulty, wpm, attempts))
        self.completed_count += 1
        self.current_difficulty = difficulty.next
        if self.completed_count >= QUOTES_PER_DAY:
            self.is_completed = True
            self.current_difficulty = Difficulty.HARD
            self.last_completion_date = utc_date_string(now or utc_now())
        return True

    def mark_completed(self, now: datetime | None = None) -> None:
        """Adopt the server's "already completed today" verdict."""
        self.is_completed = True
        self.last_completion_date = utc_date_string(now or utc_now())

    # ── (de)serialisation ─────────────────────────────────────────────

    def to_dict(self) -> dict:
        data = asdict(self)
        data["current_difficulty"] = self.current_difficulty.value
        data["quote_stats"] = [
            {"difficulty": s.difficulty.value, "wpm": s.wpm, "attempts": s.attempts}
            for s in self.quote_stats
        ]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "DailyProgressState":
        """Rebuild a state, dropping duplicate difficulties."""
        stats: list[QuoteStat] = []
        seen: set[Difficulty] = set()
        for raw in data.get("quote_stats", []):
            difficulty = Difficulty(raw["difficulty"])
            if difficulty in seen:
                continue
            seen.add(difficulty)
            stats.append(QuoteStat(difficulty, int(raw["wpm"]), int(raw["attempts"])))
        return cls(
            current_difficulty=Difficulty(data.get("current_difficulty", "easy")),
            completed_count=len(stats),
            is_completed=bool(data.get("is_completed", False)),
            last_completion_date=str(data.get("last_completion_date", "")),
            quote_stats=stats,
        )


def time_until_reset(now: datetime | None = None) -> tuple[int, int, int]:
    """``(hours, minutes, seconds)`` until the next UTC midnight."""
    remaining = seconds_until_reset(now or utc_now())
    hours, rest = divmod(remaining, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


# ── key-value stores ──────────────────────────────────────────────────────


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """All keys in one JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable progress file %s, starting fresh", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())


class DailyProgressStore:
    """Loads and saves today's :class:`DailyProgressState`."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @staticmethod
    def key_for(now: datetime) -> str:
        return f"{KEY_PREFIX}{utc_date_string(now)}"

    def load(self, now: datetime | None = None) -> DailyProgressState:
        """Today's state; stale days are purged, corrupt data is reset."""
        now = now or utc_now()
        key = self.key_for(now)
        raw = self._store.get(key)
        if raw is None:
            for old in self._store.keys():
                if old.startswith(KEY_PREFIX) and old != key:
                    self._store.delete(old)
            return DailyProgressState()
        try:
            return DailyProgressState.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.error("Failed to parse daily progress for %s", key)
            return DailyProgressState()

    def save(self, state: DailyProgressState, now: datetime | None = None) -> None:
        self._store.set(self.key_for(now or utc_now()), json.dumps(state.to_dict()))

    def reset(self, now: datetime | None = None) -> DailyProgressState:
        self._store.delete(self.key_for(now or utc_now()))
        logger.info("Daily progress reset")
        return DailyProgressState()

    def clear_all(self) -> None:
        for key in self._store.keys():
            if key.startswith(KEY_PREFIX):
                self._store.delete(key)
