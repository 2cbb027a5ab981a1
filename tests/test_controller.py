"""Tests for GameController: key routing, completion flow and signals."""

import json
from datetime import timedelta

import pytest

from typerpg.backend.sessions import make_submitter
from typerpg.backend.users import get_progress
from typerpg.gamification.xp import Mode
from typerpg.modes.completion import CompletionAction
from typerpg.modes.controller import GameController
from typerpg.modes.daily_progress import (
    DailyProgressStore,
    Difficulty,
    MemoryStore,
)
from typerpg.settings import Settings

from helpers import FakeClock, SignalCollector, SubmitRecorder


class FixedTexts:
    """Text source that always hands out the same passage."""

    def __init__(self, text="cat dog"):
        self.text = text
        self.calls: list[tuple] = []

    def __call__(self, mode, difficulty=None, *, word_count=25, rng=None):
        self.calls.append((Mode(mode), difficulty))
        return self.text


def _type_passage(controller, clock, text, seconds=60.0):
    """Type *text*, spreading it over *seconds* of clock time."""
    for idx, ch in enumerate(text):
        if idx == len(text) - 1:
            clock.advance(seconds)
        controller.handle_key(ch)


@pytest.fixture
def texts():
    return FixedTexts()


@pytest.fixture
def store():
    return DailyProgressStore(MemoryStore())


@pytest.fixture
def make_controller(qapp, clock, now, texts, store, instant_settings):
    def factory(submit, **kwargs):
        kwargs.setdefault("mode", Mode.ENDLESS)
        kwargs.setdefault("settings", instant_settings)
        kwargs.setdefault("wall_clock", lambda: now)
        return GameController(
            submit,
            clock=clock,
            text_source=texts,
            progress_store=store,
            **kwargs,
        )
    return factory


# ═══════════════════════════════════════════════════════════════════════════
#  KEY ROUTING
# ═══════════════════════════════════════════════════════════════════════════


class TestKeys:

    def test_loads_text_on_start(self, make_controller, texts):
        controller = make_controller(SubmitRecorder())
        assert controller.engine.text == "cat dog"
        assert texts.calls == [(Mode.ENDLESS, None)]

    def test_tab_ignored(self, make_controller):
        controller = make_controller(SubmitRecorder())
        controller.handle_key("Tab")
        assert controller.engine.cursor == 0
        assert not controller.engine.has_started

    def test_unknown_named_key_ignored(self, make_controller):
        controller = make_controller(SubmitRecorder())
        controller.handle_key("Shift")
        assert controller.engine.cursor == 0

    def test_backspace_variants(self, make_controller):
        controller = make_controller(SubmitRecorder())
        for ch in "ca":
            controller.handle_key(ch)
        controller.handle_key("Backspace")
        assert controller.engine.cursor == 1
        controller.handle_key("Backspace", ctrl=True)
        assert controller.engine.cursor == 0

    def test_live_wpm_emitted(self, make_controller, clock):
        controller = make_controller(SubmitRecorder())
        wpm = SignalCollector()
        controller.wpm_changed.connect(wpm)
        for ch in "cat":
            controller.handle_key(ch)
        clock.advance(6)
        controller.handle_key(" ")
        # "cat " locked: 4 chars in 0.1 minutes
        assert wpm.last == 8

    def test_word_completed_relayed(self, make_controller):
        controller = make_controller(SubmitRecorder())
        words = SignalCollector()
        controller.word_completed.connect(words)
        for ch in "cat ":
            controller.handle_key(ch)
        assert len(words) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  ENDLESS
# ═══════════════════════════════════════════════════════════════════════════


class TestEndless:

    def test_finished_passage_submitted(self, make_controller, clock, texts):
        submit = SubmitRecorder(xp_delta=50)
        controller = make_controller(submit)
        results = SignalCollector()
        awarded = SignalCollector()
        controller.completion_handled.connect(results)
        controller.xp_awarded.connect(awarded)

        _type_passage(controller, clock, "cat dog")

        assert submit.payloads == [{
            "mode": "endless",
            "wpm": 1,
            "total_words": 2,
            "correct_words": 2,
            "incorrect_words": 0,
        }]
        result = results.last
        assert result.action is CompletionAction.LOAD_NEW_TEXT
        assert result.xp_delta == 50
        assert awarded.last == {"amount": 50, "title": "cool", "mode": "endless"}
        # next passage loaded straight away with zero delay
        assert len(texts.calls) == 2
        assert controller.engine.cursor == 0
        assert not controller.is_processing

    def test_no_xp_signal_for_zero_award(self, make_controller, clock):
        controller = make_controller(SubmitRecorder(xp_delta=0))
        awarded = SignalCollector()
        controller.xp_awarded.connect(awarded)
        _type_passage(controller, clock, "cat dog")
        assert len(awarded) == 0

    def test_progress_refreshed(self, make_controller, clock):
        fetched = {"level": 2, "xp": 5, "xp_to_next_level": 24}
        controller = make_controller(
            SubmitRecorder(xp_delta=50), fetch_progress=lambda: fetched,
        )
        progress = SignalCollector()
        controller.progress_changed.connect(progress)
        _type_passage(controller, clock, "cat dog")
        assert progress.last == fetched

    def test_submit_failure_keeps_playing(self, make_controller, clock, texts):
        controller = make_controller(SubmitRecorder(error=RuntimeError("offline")))
        failures = SignalCollector()
        awarded = SignalCollector()
        controller.persistence_failed.connect(failures)
        controller.xp_awarded.connect(awarded)

        _type_passage(controller, clock, "cat dog")

        assert failures.last == "offline"
        assert len(awarded) == 0
        assert controller.last_result.submitted is False
        assert len(texts.calls) == 2

        controller.handle_key("c")
        assert controller.engine.cursor == 1

    def test_progress_refresh_failure(self, make_controller, clock):
        def broken():
            raise RuntimeError("timeout")

        controller = make_controller(SubmitRecorder(xp_delta=50), fetch_progress=broken)
        failures = SignalCollector()
        controller.persistence_failed.connect(failures)
        _type_passage(controller, clock, "cat dog")
        assert failures.last == "timeout"

    def test_one_submission_per_passage(self, make_controller, clock):
        submit = SubmitRecorder(xp_delta=50)
        slow = Settings(next_quote_delay_ms=60_000, new_text_delay_ms=60_000)
        controller = make_controller(submit, settings=slow)
        _type_passage(controller, clock, "cat dog")

        assert controller.is_processing
        controller.engine.finished.emit()
        controller.handle_key("x")

        assert len(submit.payloads) == 1

    def test_against_local_backend(self, make_controller, clock):
        controller = make_controller(
            make_submitter("player-1", "Alice"),
            fetch_progress=lambda: get_progress("player-1"),
        )
        progress = SignalCollector()
        controller.progress_changed.connect(progress)

        _type_passage(controller, clock, "cat dog")

        # 50 XP at wpm 1: level 3 with 6 XP carried over
        assert progress.last == {"level": 3, "xp": 6, "xp_to_next_level": 29}


# ═══════════════════════════════════════════════════════════════════════════
#  DAILY
# ═══════════════════════════════════════════════════════════════════════════


class TestDaily:

    def test_three_quotes_one_submission(self, make_controller, clock, texts, store, now):
        submit = SubmitRecorder(xp_delta=250)
        controller = make_controller(submit, mode=Mode.DAILY)
        done = SignalCollector()
        controller.daily_completed.connect(done)

        for _ in range(3):
            _type_passage(controller, clock, "cat dog")

        assert [d for _, d in texts.calls] == [
            Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD,
        ]
        assert submit.payloads == [{
            "mode": "daily",
            "wpm": 1,
            "total_words": 2,
            "correct_words": 2,
            "incorrect_words": 0,
        }]
        assert done.last["xp_delta"] == 250
        assert done.last["average_wpm"] == 1
        assert len(done.last["quote_stats"]) == 3
        assert controller.is_locked_out
        assert store.load(now).is_completed

    def test_locked_out_ignores_keys(self, make_controller, clock):
        controller = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        for _ in range(3):
            _type_passage(controller, clock, "cat dog")
        cursor = controller.engine.cursor
        controller.handle_key("c")
        assert controller.engine.cursor == cursor

    def test_too_many_mistakes_retries(self, make_controller, clock, texts):
        texts.text = "a b c d e f"
        submit = SubmitRecorder()
        controller = make_controller(submit, mode=Mode.DAILY)
        results = SignalCollector()
        controller.completion_handled.connect(results)

        _type_passage(controller, clock, "x x x x x x")

        assert results.last.action is CompletionAction.RETRY
        assert controller.attempts == 2
        assert submit.payloads == []
        assert texts.calls[-1] == (Mode.DAILY, Difficulty.EASY)
        assert controller.daily_progress.completed_count == 0

    def test_attempts_reset_after_success(self, make_controller, clock, texts):
        texts.text = "a b c d e f"
        controller = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        _type_passage(controller, clock, "x x x x x x")
        _type_passage(controller, clock, "a b c d e f")

        assert controller.attempts == 1
        stat = controller.daily_progress.quote_stats[0]
        assert stat.difficulty is Difficulty.EASY
        assert stat.attempts == 2

    def test_rejected_by_server(self, make_controller, clock):
        from typerpg.errors import DailyAlreadyCompletedError

        controller = make_controller(
            SubmitRecorder(error=DailyAlreadyCompletedError(3600)), mode=Mode.DAILY,
        )
        failures = SignalCollector()
        controller.persistence_failed.connect(failures)
        for _ in range(3):
            _type_passage(controller, clock, "cat dog")

        assert controller.last_result.time_until_reset_seconds == 3600
        assert failures.last == "daily_already_completed"
        assert controller.is_locked_out

    def test_server_verdict_locks_out(self, make_controller, store, now):
        controller = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        controller.sync_daily_status({"completed_today": True})
        assert controller.is_locked_out
        assert store.load(now).is_completed

    def test_progress_survives_restart(self, make_controller, clock, texts):
        first = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        _type_passage(first, clock, "cat dog")

        second = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        assert second.daily_progress.completed_count == 1
        assert texts.calls[-1] == (Mode.DAILY, Difficulty.MEDIUM)

    def test_new_utc_day_lifts_lockout(self, make_controller, clock, texts, now):
        today = [now]
        controller = make_controller(
            SubmitRecorder(), mode=Mode.DAILY, wall_clock=lambda: today[0],
        )
        for _ in range(3):
            _type_passage(controller, clock, "cat dog")
        assert controller.is_locked_out

        today[0] = now + timedelta(days=1)
        controller.handle_key("c")

        assert not controller.is_locked_out
        assert controller.engine.cursor == 1
        assert controller.daily_progress.completed_count == 0
        assert texts.calls[-1] == (Mode.DAILY, Difficulty.EASY)

    def test_yesterdays_quotes_not_carried_over(self, make_controller, clock, store, now):
        today = [now]
        submit = SubmitRecorder(xp_delta=250)
        controller = make_controller(
            submit, mode=Mode.DAILY, wall_clock=lambda: today[0],
        )
        _type_passage(controller, clock, "cat dog")
        _type_passage(controller, clock, "cat dog")

        tomorrow = now + timedelta(days=1)
        today[0] = tomorrow
        _type_passage(controller, clock, "cat dog")

        assert submit.payloads == []
        assert controller.attempts == 1
        stats = controller.daily_progress.quote_stats
        assert [s.difficulty for s in stats] == [Difficulty.EASY]
        assert store.load(tomorrow).completed_count == 1

    def test_switch_to_endless_not_locked(self, make_controller):
        controller = make_controller(SubmitRecorder(), mode=Mode.DAILY)
        controller.sync_daily_status({"completed_today": True})
        controller.set_mode(Mode.ENDLESS)
        assert not controller.is_locked_out
        controller.handle_key("c")
        assert controller.engine.cursor == 1


def test_default_store_uses_settings_path(qapp, clock, now, texts, tmp_path):
    path = tmp_path / "progress.json"
    settings = Settings(
        daily_progress_path=str(path), next_quote_delay_ms=0, new_text_delay_ms=0,
    )
    controller = GameController(
        SubmitRecorder(),
        mode=Mode.DAILY,
        settings=settings,
        clock=clock,
        wall_clock=lambda: now,
        text_source=texts,
    )
    _type_passage(controller, clock, "cat dog")

    assert "daily_progress_2026-10-19" in json.loads(path.read_text())
