"""Gamification package."""

from .xp import (
    Mode,
    ModeConfig,
    MODE_CONFIG,
    calculate_xp_delta,
    xp_to_next_level,
    apply_xp,
    level_progress,
    wpm_title,
)
from .daily import (
    utc_day_window,
    utc_date_string,
    seconds_until_reset,
    in_current_day,
)

__all__ = [
    "Mode",
    "ModeConfig",
    "MODE_CONFIG",
    "calculate_xp_delta",
    "xp_to_next_level",
    "apply_xp",
    "level_progress",
    "wpm_title",
    "utc_day_window",
    "utc_date_string",
    "seconds_until_reset",
    "in_current_day",
]
