"""XP and leveling logic for Typing RPG.

XP Awards
---------
Each submitted session earns ``floor(amount * wpm_multiplier)`` XP where

- ``amount`` starts at the mode's base (endless 100, daily 500).
- Endless mode scales ``amount`` by the number of incorrect words::

      0      x1.0
      1-2    x0.8
      3-4    x0.6
      5-6    x0.4
      7-8    x0.2
      9+     0 XP

  Daily mode skips this step; too many mistakes fail the attempt instead.
- ``wpm_multiplier`` is ``wpm / 60`` clamped to ``[0.5, cap]`` with a cap
  of 1.25 (endless) or 1.5 (daily).

Leveling Curve
--------------
Level 1->2 costs 20 XP.  Every following level costs 20% more than the
previous one, rounded *up at each step*.  Players store ``(level, xp)``
where ``xp`` is progress inside the current level, so
``0 <= xp < xp_to_next_level(level)`` always holds.

WPM Titles
----------
A celebratory word for the WPM of a finished passage::

    <40 cool  <60 great  <80 FAST  <100 SUPER FAST  <120 INSANELY FAST
    120+ GODLIKE
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class Mode(str, Enum):
    DAILY = "daily"
    ENDLESS = "endless"


@dataclass(frozen=True)
class ModeConfig:
    base: int                  # XP before multipliers
    target_wpm: int            # WPM that earns a 1.0x multiplier
    wpm_floor: float
    wpm_cap: float
    step_penalties: bool       # scale by incorrect word count


MODE_CONFIG: dict[Mode, ModeConfig] = {
    Mode.ENDLESS: ModeConfig(
        base=100, target_wpm=60, wpm_floor=0.5, wpm_cap=1.25,
        step_penalties=True,
    ),
    # wpm is expected to be the average across the three difficulties
    Mode.DAILY: ModeConfig(
        base=500, target_wpm=60, wpm_floor=0.5, wpm_cap=1.5,
        step_penalties=False,
    ),
}

# (minimum incorrect words, multiplier); first match wins.
STEP_PENALTIES: list[tuple[int, float]] = [
    (9, 0.0),
    (7, 0.2),
    (5, 0.4),
    (3, 0.6),
    (1, 0.8),
]

# ── leveling constants ───────────────────────────────────────────────────

BASE_XP_PER_LEVEL = 20     # XP to go from level 1 -> 2
LEVEL_SCALING = 1.2        # each level needs 20% more than the last


# ── XP formula ───────────────────────────────────────────────────────────


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def step_penalty(incorrect_words: int) -> float:
    """Multiplier applied to the base award for endless mistakes."""
    for threshold, multiplier in STEP_PENALTIES:
        if incorrect_words >= threshold:
            return multiplier
    return 1.0


def calculate_xp_delta(mode: Mode | str, incorrect_words: int, wpm: float) -> int:
    """XP earned for one submitted session.  Never negative."""
    cfg = MODE_CONFIG[Mode(mode)]

    amount: float = cfg.base
    if cfg.step_penalties:
        amount *= step_penalty(incorrect_words)

    wpm_multiplier = _clamp(wpm / cfg.target_wpm, cfg.wpm_floor, cfg.wpm_cap)
    return max(0, math.floor(amount * wpm_multiplier))


# ── level math ───────────────────────────────────────────────────────────


def xp_to_next_level(level: int) -> int:
    """XP needed to go from *level* to *level + 1*.

    Iterated with a ceiling at every step; ``ceil(20 * 1.2 ** n)`` drifts
    from this at higher levels.
    """
    required = BASE_XP_PER_LEVEL
    for _ in range(2, level + 1):
        required = math.ceil(required * LEVEL_SCALING)
    return required


def apply_xp(level: int, xp: int, delta: int) -> tuple[int, int]:
    """Add *delta* to ``(level, xp)`` and roll over as many levels as needed."""
    new_level = level
    new_xp = xp + delta
    needed = xp_to_next_level(new_level)
    while new_xp >= needed:
        new_xp -= needed
        new_level += 1
        needed = xp_to_next_level(new_level)
    return new_level, new_xp


def level_progress(level: int, xp: int) -> float:
    """0.0 -> 1.0 progress through the current level."""
    needed = xp_to_next_level(level)
    return max(0.0, min(1.0, xp / needed))


# ── WPM titles ───────────────────────────────────────────────────────────

# Ordered ascending; first upper bound that exceeds the WPM wins.
WPM_TITLES: list[tuple[int, str]] = [
    (40, "cool"),
    (60, "great"),
    (80, "FAST"),
    (100, "SUPER FAST"),
    (120, "INSANELY FAST"),
]


def wpm_title(wpm: float) -> str:
    """Return the celebration text for a finished passage."""
    for upper, title in WPM_TITLES:
        if wpm < upper:
            return title
    return "GODLIKE"
