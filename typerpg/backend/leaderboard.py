"""Public leaderboards: highest level, and best daily WPM today."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from ..database.db import get_session
from ..database.models import GameSession, User
from ..errors import PersistenceError
from ..gamification.daily import as_utc, utc_day_window, utc_now

logger = logging.getLogger(__name__)

DEFAULT_LEADERBOARD_LIMIT = 50
MAX_LIMIT = 100


def _to_int(value) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def clamp_limit(limit, default: int) -> int:
    """Page size in ``[1, MAX_LIMIT]``; missing or invalid -> *default*."""
    parsed = _to_int(limit)
    if parsed is None or parsed <= 0:
        return default
    return min(parsed, MAX_LIMIT)


def clamp_offset(offset) -> int:
    parsed = _to_int(offset)
    if parsed is None or parsed < 0:
        return 0
    return parsed


def level_leaderboard(
    limit=DEFAULT_LEADERBOARD_LIMIT, offset=0,
) -> list[dict]:
    """Players ranked by level, then XP, then user id."""
    limit = clamp_limit(limit, DEFAULT_LEADERBOARD_LIMIT)
    offset = clamp_offset(offset)
    try:
        with get_session() as db:
            rows = (
                db.query(User)
                .order_by(User.level.desc(), User.xp.desc(), User.user_id.asc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [
                {
                    "rank": offset + idx + 1,
                    "user_id": u.user_id,
                    "username": u.username,
                    "level": u.level,
                    "xp": u.xp,
                    "updated_at": u.updated_at,
                }
                for idx, u in enumerate(rows)
            ]
    except SQLAlchemyError as exc:
        logger.exception("level_leaderboard failed")
        raise PersistenceError("Failed to load leaderboard") from exc


def today_wpm_leaderboard(
    limit=DEFAULT_LEADERBOARD_LIMIT,
    offset=0,
    now: datetime | None = None,
) -> list[dict]:
    """Today's daily results, one per player, fastest first.

    Ties go to whoever finished earlier.
    """
    limit = clamp_limit(limit, DEFAULT_LEADERBOARD_LIMIT)
    offset = clamp_offset(offset)
    day_start, day_end = utc_day_window(as_utc(now or utc_now()))
    start = day_start.replace(tzinfo=None)
    end = day_end.replace(tzinfo=None)

    try:
        with get_session() as db:
            rows = (
                db.query(GameSession, User.username)
                .join(User, User.user_id == GameSession.user_id)
                .filter(
                    GameSession.mode == "daily",
                    GameSession.created_at >= start,
                    GameSession.created_at < end,
                )
                .order_by(GameSession.created_at.desc(), GameSession.id.desc())
                .all()
            )
            latest: dict[str, tuple[GameSession, str]] = {}
            for session, username in rows:
                latest.setdefault(session.user_id, (session, username))
    except SQLAlchemyError as exc:
        logger.exception("today_wpm_leaderboard failed")
        raise PersistenceError("Failed to load leaderboard") from exc

    ranked = sorted(latest.values(), key=lambda r: (-r[0].wpm, r[0].created_at))
    page = ranked[offset:offset + limit]
    return [
        {
            "rank": offset + idx + 1,
            "user_id": session.user_id,
            "username": username,
            "wpm": session.wpm,
        }
        for idx, (session, username) in enumerate(page)
    ]
