"""Shared test helpers for Typing RPG."""

from typerpg.engine.performance import PerformanceStats


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SubmitRecorder:
    """Stand-in for the session submission call."""

    def __init__(self, xp_delta: int = 0, error: Exception | None = None):
        self.payloads: list[dict] = []
        self.xp_delta = xp_delta
        self.error = error

    def __call__(self, payload: dict) -> dict:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return {"xp_delta": self.xp_delta}


def type_text(press, text: str) -> None:
    """Send each character of *text* to *press* (space included)."""
    for ch in text:
        press(ch)


def make_stats(incorrect: int = 0, wpm: int = 60, correct: int = 10) -> PerformanceStats:
    return PerformanceStats(
        correct_words=correct,
        incorrect_words=incorrect,
        total_chars_including_spaces=correct * 5,
        elapsed_minutes=1.0,
        final_wpm=wpm,
    )


def engine_keys(engine):
    """A ``press`` callable routing space to ``space_bar``."""

    def press(ch: str) -> None:
        if ch == " ":
            engine.space_bar()
        else:
            engine.input_character(ch)

    return press
