"""Backend operations: players, sessions and leaderboards."""

from .leaderboard import level_leaderboard, today_wpm_leaderboard
from .schemas import SessionCreate, validate_session
from .sessions import create_session, get_daily_status, list_sessions, make_submitter
from .users import get_or_create_user, get_progress, get_user

__all__ = [
    "level_leaderboard",
    "today_wpm_leaderboard",
    "SessionCreate",
    "validate_session",
    "create_session",
    "get_daily_status",
    "list_sessions",
    "make_submitter",
    "get_or_create_user",
    "get_progress",
    "get_user",
]
