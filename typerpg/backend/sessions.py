"""Session submission, history and the once-per-day daily guard.

``create_session`` runs in a single transaction:

1. validate the user id and payload (nothing is written on failure)
2. daily mode only: reject if the user's latest daily session is inside
   the current UTC day
3. read-or-create the player
4. insert the ``GameSession`` row, apply XP and roll levels over

Step 2 is a read-then-write.  The ``(user_id, daily_date)`` unique
constraint catches two daily submissions that both pass the read; the
loser gets the same :class:`DailyAlreadyCompletedError`.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..database.db import get_session
from ..database.models import GameSession
from ..errors import DailyAlreadyCompletedError, PersistenceError
from ..gamification.daily import (
    as_utc, in_current_day, seconds_until_reset, utc_date, utc_now,
)
from ..gamification.xp import apply_xp, calculate_xp_delta
from .leaderboard import clamp_limit
from .schemas import SessionCreate, validate_session, validate_user
from .users import DEFAULT_USERNAME, ensure_user

logger = logging.getLogger(__name__)

DEFAULT_SESSION_LIMIT = 20


def _naive_utc(moment: datetime) -> datetime:
    return as_utc(moment).replace(tzinfo=None)


def _is_daily_conflict(exc: IntegrityError) -> bool:
    """True when *exc* comes from the one-daily-per-day unique key."""
    message = str(exc.orig)
    return "uq_daily_once" in message or "game_sessions.daily_date" in message


def _latest_daily(db, user_id: str) -> GameSession | None:
    return (
        db.query(GameSession)
        .filter_by(user_id=user_id, mode="daily")
        .order_by(GameSession.created_at.desc(), GameSession.id.desc())
        .first()
    )


def create_session(
    user_id: str,
    payload: dict | SessionCreate,
    *,
    username: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Store a finished session and award its XP.

    Returns ``session``, ``xp_delta``, ``level``, ``xp``, ``old_level`` and
    ``level_up``.  Raises :class:`ValidationFailedError`,
    :class:`DailyAlreadyCompletedError` or :class:`PersistenceError`.
    """
    validate_user(user_id, username or DEFAULT_USERNAME)
    data = validate_session(payload)
    now = as_utc(now or utc_now())
    is_daily = data.mode == "daily"

    try:
        with get_session() as db:
            if is_daily:
                latest = _latest_daily(db, user_id)
                if latest is not None and in_current_day(latest.created_at, now):
                    raise DailyAlreadyCompletedError(seconds_until_reset(now))

            user = ensure_user(db, user_id, username)
            xp_delta = calculate_xp_delta(data.mode, data.incorrect_words, data.wpm)
            record = GameSession(
                user_id=user_id,
                mode=data.mode,
                wpm=data.wpm,
                total_words=data.total_words,
                correct_words=data.correct_words,
                incorrect_words=data.incorrect_words,
                xp_delta=xp_delta,
                created_at=_naive_utc(now),
                daily_date=utc_date(now) if is_daily else None,
            )
            db.add(record)
            db.flush()

            old_level = user.level
            user.level, user.xp = apply_xp(user.level, user.xp, xp_delta)
            user.updated_at = _naive_utc(now)
            db.flush()

            result = {
                "session": record.to_dict(),
                "xp_delta": xp_delta,
                "level": user.level,
                "xp": user.xp,
                "old_level": old_level,
                "level_up": user.level > old_level,
            }
    except DailyAlreadyCompletedError:
        logger.info("Daily already completed today for %s", user_id)
        raise
    except IntegrityError as exc:
        if is_daily and _is_daily_conflict(exc):
            logger.info("Concurrent daily submission rejected for %s", user_id)
            raise DailyAlreadyCompletedError(seconds_until_reset(now)) from exc
        logger.exception("create_session failed for %s", user_id)
        raise PersistenceError("Failed to create session") from exc
    except SQLAlchemyError as exc:
        logger.exception("create_session failed for %s", user_id)
        raise PersistenceError("Failed to create session") from exc

    logger.info(
        "Session saved for %s: mode=%s wpm=%d xp=+%d level=%d",
        user_id, data.mode, data.wpm, xp_delta, result["level"],
    )
    return result


def list_sessions(user_id: str, limit: int | str | None = DEFAULT_SESSION_LIMIT) -> list[dict]:
    """The user's sessions, newest first."""
    limit = clamp_limit(limit, DEFAULT_SESSION_LIMIT)
    try:
        with get_session() as db:
            rows = (
                db.query(GameSession)
                .filter_by(user_id=user_id)
                .order_by(GameSession.id.desc())
                .limit(limit)
                .all()
            )
            return [row.to_dict() for row in rows]
    except SQLAlchemyError as exc:
        logger.exception("list_sessions failed for %s", user_id)
        raise PersistenceError("Failed to load sessions") from exc


def get_daily_status(user_id: str, now: datetime | None = None) -> dict:
    """``{completed_today, time_until_reset_seconds}`` for *user_id*."""
    now = as_utc(now or utc_now())
    try:
        with get_session() as db:
            latest = _latest_daily(db, user_id)
            completed = latest is not None and in_current_day(latest.created_at, now)
    except SQLAlchemyError as exc:
        logger.exception("get_daily_status failed for %s", user_id)
        raise PersistenceError("Failed to load daily status") from exc
    return {
        "completed_today": completed,
        "time_until_reset_seconds": seconds_until_reset(now),
    }


def make_submitter(user_id: str, username: str | None = None):
    """A ``submit_session`` callable for :class:`GameController`."""

    def submit(payload: dict) -> dict:
        return create_session(user_id, payload, username=username)

    return submit
