"""Game screen logic: one live passage at a time.

``GameController`` feeds keys into a :class:`TypingEngine`, notices when
the passage is finished, scores it, runs the completion policy for the
current mode, submits through an injected callable and asks for the next
passage.  Nothing here touches the database directly; the submit and
fetch callables may be backed by the local backend or a remote API.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..engine.keystrokes import TypingEngine
from ..engine.performance import calculate_current_wpm, calculate_final_stats
from ..gamification.daily import utc_date, utc_now
from ..gamification.xp import Mode, wpm_title
from ..settings import Settings
from .completion import (
    CompletionAction,
    CompletionContext,
    CompletionResult,
    SubmitSession,
    handle_completion,
)
from .daily_progress import DailyProgressState, DailyProgressStore, JsonFileStore
from .texts import generate_text

logger = logging.getLogger(__name__)


class GameController(QObject):
    """Owns the typing session for the active game screen.

    Signals
    -------
    text_changed(text: str)
        A new passage is ready.
    wpm_changed(wpm: int)
        Live WPM after each key while the passage is in progress.
    word_completed()
        Relayed from the engine (drives the monster health bar).
    completion_handled(result: CompletionResult)
        Emitted once per finished passage.
    xp_awarded(data: dict)
        Keys: ``amount``, ``title`` (WPM celebration text), ``mode``.
    progress_changed(data: dict)
        Fresh ``{level, xp, ...}`` fetched after a successful submission.
    persistence_failed(reason: str)
        Submission or progress refresh failed.  Typing carries on.
    daily_completed(data: dict)
        All three daily quotes are done.  Keys: ``average_wpm``,
        ``xp_delta``, ``quote_stats``.
    """

    text_changed = pyqtSignal(str)
    wpm_changed = pyqtSignal(int)
    word_completed = pyqtSignal()
    completion_handled = pyqtSignal(object)
    xp_awarded = pyqtSignal(object)
    progress_changed = pyqtSignal(object)
    persistence_failed = pyqtSignal(str)
    daily_completed = pyqtSignal(object)

    def __init__(
        self,
        submit_session: SubmitSession,
        parent: QObject | None = None,
        *,
        mode: Mode = Mode.ENDLESS,
        fetch_progress: Callable[[], dict] | None = None,
        progress_store: DailyProgressStore | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
        text_source: Callable[..., str] = generate_text,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._submit = submit_session
        self._fetch_progress = fetch_progress
        self._settings = settings or Settings()
        self._store = progress_store or DailyProgressStore(
            JsonFileStore(self._settings.daily_progress_path)
        )
        self._clock = clock
        self._wall_clock = wall_clock
        self._rng = rng or random.Random()
        self._text_source = text_source

        # ── mode state ────────────────────────────────────────────────
        self._mode = Mode(mode)
        self._daily_day = wall_clock()
        self._daily: DailyProgressState = self._store.load(self._daily_day)
        self._attempts = 1
        self._shown_daily_completion = False

        # ── per-passage state ─────────────────────────────────────────
        self._completion_done = False
        self._processing = False
        self._last_result: CompletionResult | None = None

        self._engine = TypingEngine(parent=self, clock=clock)
        self._engine.finished.connect(self._on_finished)
        self._engine.word_completed.connect(self.word_completed)

        self.new_text()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TypingEngine:
        return self._engine

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def daily_progress(self) -> DailyProgressState:
        return self._daily

    @property
    def last_result(self) -> CompletionResult | None:
        return self._last_result

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def is_locked_out(self) -> bool:
        """Daily mode after today's challenge is done: no more typing."""
        return self._mode is Mode.DAILY and self._daily.is_completed

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def set_mode(self, mode: Mode) -> None:
        self._mode = Mode(mode)
        self._attempts = 1
        self.new_text()

    def restart(self) -> None:
        """Throw the current passage away and start a fresh one."""
        self.new_text()

    def new_text(self) -> None:
        self._check_new_day()
        if self._mode is Mode.DAILY:
            text = self._text_source(
                Mode.DAILY, self._daily.current_difficulty, rng=self._rng,
            )
        else:
            text = self._text_source(
                Mode.ENDLESS,
                word_count=self._settings.endless_word_count,
                rng=self._rng,
            )
        self._engine.load_text(text)
        self._completion_done = False
        self._processing = False
        self.text_changed.emit(text)

    def handle_key(self, key: str, *, ctrl: bool = False, alt: bool = False) -> None:
        """Route one key event from the UI."""
        if self._check_new_day() and self._mode is Mode.DAILY:
            self.new_text()
        if self._processing or self.is_locked_out or key == "Tab":
            return

        if key == " ":
            self._engine.space_bar()
        elif key == "Backspace":
            if ctrl or alt:
                self._engine.delete_word()
            else:
                self._engine.backspace()
        elif len(key) == 1:
            self._engine.input_character(key)
        else:
            return

        engine = self._engine
        if engine.has_started and not engine.is_at_end and not self._processing:
            self.wpm_changed.emit(calculate_current_wpm(
                engine.text, engine.char_status, engine.start_time, engine.now(),
            ))

    def sync_daily_status(self, status: dict) -> None:
        """Reconcile the local daily cache with the server's verdict."""
        self._check_new_day()
        if status.get("completed_today") and not self._daily.is_completed:
            self._daily.mark_completed(self._wall_clock())
            self._store.save(self._daily, self._daily_day)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _check_new_day(self) -> bool:
        """Reload daily progress once the UTC date has moved on."""
        now = self._wall_clock()
        if utc_date(now) == utc_date(self._daily_day):
            return False
        logger.info("New UTC day %s, reloading daily progress", utc_date(now))
        self._daily_day = now
        self._daily = self._store.load(now)
        self._attempts = 1
        self._shown_daily_completion = False
        return True

    def _on_finished(self) -> None:
        if self._completion_done:
            return
        self._completion_done = True

        engine = self._engine
        stats = calculate_final_stats(
            engine.text, engine.char_status, engine.start_time, engine.now(),
        )
        if stats is None:
            self.new_text()
            return

        self._processing = True
        self._check_new_day()
        context = None
        if self._mode is Mode.DAILY:
            context = CompletionContext.from_progress(
                self._daily, self._attempts, self._shown_daily_completion,
            )
        result = handle_completion(
            self._mode, stats, self._submit, context, self._daily,
        )
        if self._mode is Mode.DAILY:
            self._store.save(self._daily, self._daily_day)

        self._last_result = result
        self.completion_handled.emit(result)
        if result.error:
            self.persistence_failed.emit(result.error)
        if result.submitted:
            self._after_submit(result, stats.final_wpm)

        if result.action is CompletionAction.RETRY:
            self._attempts = result.new_attempts or self._attempts + 1
            self._schedule(self._settings.new_text_delay_ms, self.new_text)
        elif result.action is CompletionAction.NEXT_QUOTE:
            self._attempts = result.new_attempts or 1
            self._schedule(self._settings.next_quote_delay_ms, self.new_text)
        elif result.action is CompletionAction.SHOW_MODAL:
            self._shown_daily_completion = True
            self._processing = False
            self.daily_completed.emit({
                "average_wpm": result.average_wpm,
                "xp_delta": result.xp_delta,
                "quote_stats": list(self._daily.quote_stats),
            })
        else:
            self._schedule(self._settings.new_text_delay_ms, self.new_text)

    def _after_submit(self, result: CompletionResult, wpm: int) -> None:
        """XP is final only once the server has confirmed it."""
        if result.xp_delta:
            self.xp_awarded.emit({
                "amount": result.xp_delta,
                "title": wpm_title(wpm),
                "mode": self._mode.value,
            })
        if self._fetch_progress is None:
            return
        try:
            progress = self._fetch_progress()
        except Exception as exc:
            logger.exception("Failed to refresh player progress")
            self.persistence_failed.emit(str(exc) or type(exc).__name__)
            return
        self.progress_changed.emit(progress)

    def _schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        if delay_ms <= 0:
            callback()
        else:
            QTimer.singleShot(delay_ms, callback)
