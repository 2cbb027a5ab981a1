"""Keystroke engine for Typing RPG.

Per-character status
--------------------
PENDING     Not reached yet (or erased again).
CORRECT     Typed and matches the passage.
INCORRECT   Typed and does not match.
SKIPPED     Left behind when the player abandoned a word with space.
LOCKED      Committed with space.  Immutable for the rest of the passage.

Transitions
-----------
PENDING -> CORRECT | INCORRECT              (input_character)
CORRECT | INCORRECT -> PENDING              (backspace / delete_word)
CORRECT -> LOCKED                           (space_bar after a clean word)
PENDING -> SKIPPED                          (space_bar mid-word)

Every operation is a silent no-op when it does not apply (cursor at either
end, locked characters in the way).  The UI can forward stray or repeated
key events without checking anything first.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal


class CharStatus(Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"
    LOCKED = "locked"


def word_start_before(text: str, position: int) -> int:
    """Index where the run of non-whitespace ending at *position* begins."""
    start = position - 1
    while start >= 0 and not text[start].isspace():
        start -= 1
    return start + 1


# ── engine ────────────────────────────────────────────────────────────────


class TypingEngine(QObject):
    """Mutable typing state for one passage.

    Signals
    -------
    character_typed(key: str)
        Emitted for every key recorded at the cursor.
    word_completed()
        Emitted once each time a clean word and its trailing space are
        locked with the space bar.
    finished()
        Emitted when the cursor reaches the end of the passage.
    """

    character_typed = pyqtSignal(str)
    word_completed = pyqtSignal()
    finished = pyqtSignal()

    def __init__(
        self,
        text: str = "",
        parent: QObject | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self.load_text(text)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def text(self) -> str:
        return self._text

    @property
    def char_status(self) -> list[CharStatus]:
        """A copy of the per-character status list."""
        return list(self._status)

    @property
    def typed_chars(self) -> list[str | None]:
        return list(self._typed)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def start_time(self) -> float | None:
        """Clock reading of the first recorded key, ``None`` before it."""
        return self._start_time

    @property
    def has_started(self) -> bool:
        return self._start_time is not None

    @property
    def is_at_end(self) -> bool:
        return self._cursor >= len(self._text)

    def now(self) -> float:
        return self._clock()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def load_text(self, text: str) -> None:
        """Start over on *text* (or the same passage again)."""
        self._text = text
        self._status: list[CharStatus] = [CharStatus.PENDING] * len(text)
        self._typed: list[str | None] = [None] * len(text)
        self._cursor = 0
        self._start_time: float | None = None

    def input_character(self, key: str) -> None:
        """Record *key* at the cursor and advance."""
        if self._cursor >= len(self._text):
            return
        if self._start_time is None:
            self._start_time = self._clock()

        pos = self._cursor
        if key == self._text[pos]:
            self._status[pos] = CharStatus.CORRECT
        else:
            self._status[pos] = CharStatus.INCORRECT
        self._typed[pos] = key
        self._cursor += 1
        self.character_typed.emit(key)
        self._check_finished()

    def backspace(self) -> None:
        """Erase the character before the cursor unless it is locked."""
        if self._cursor <= 0:
            return
        pos = self._cursor - 1
        if self._status[pos] is CharStatus.LOCKED:
            return
        self._status[pos] = CharStatus.PENDING
        self._typed[pos] = None
        self._cursor = pos

    def delete_word(self) -> None:
        """Erase back to the start of the current or previous word.

        Refused entirely if any character in that span is locked.
        """
        if self._cursor <= 0:
            return

        start = self._cursor - 1
        while start >= 0 and self._text[start].isspace():
            start -= 1
        while start >= 0 and not self._text[start].isspace():
            start -= 1
        start += 1

        span = range(start, self._cursor)
        if any(self._status[i] is CharStatus.LOCKED for i in span):
            return
        for i in span:
            self._status[i] = CharStatus.PENDING
            self._typed[i] = None
        self._cursor = start

    def space_bar(self) -> None:
        """Lock a clean word, skip an abandoned one, or record a wrong space."""
        if self._cursor >= len(self._text):
            return

        pos = self._cursor
        start = word_start_before(self._text, pos)
        locked = start < pos and all(
            self._status[i] is CharStatus.CORRECT for i in range(start, pos)
        )
        if locked:
            for i in range(start, pos):
                self._status[i] = CharStatus.LOCKED

        if self._text[pos] == " ":
            if locked:
                self._status[pos] = CharStatus.LOCKED
                self._typed[pos] = " "
                self._cursor += 1
                self.character_typed.emit(" ")
                self.word_completed.emit()
                self._check_finished()
            else:
                self.input_character(" ")
        elif not locked:
            self.input_character(" ")
        else:
            self._skip_word()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _skip_word(self) -> None:
        """Mark the rest of the word skipped and jump to the next one."""
        text = self._text
        pos = self._cursor
        while pos < len(text) and not text[pos].isspace():
            if self._status[pos] is CharStatus.PENDING:
                self._status[pos] = CharStatus.SKIPPED
            pos += 1
        while pos < len(text) and text[pos].isspace():
            pos += 1
        self._cursor = pos
        self._check_finished()

    def _check_finished(self) -> None:
        if self._cursor >= len(self._text):
            self.finished.emit()
