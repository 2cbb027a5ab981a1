"""Player rows: lookup, creation and level/XP progress."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as OrmSession

from ..database.db import get_session
from ..database.models import User
from ..errors import PersistenceError, UserNotFoundError
from ..gamification.xp import xp_to_next_level
from .schemas import validate_user

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "Guest"


def user_to_dict(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "username": user.username,
        "level": user.level,
        "xp": user.xp,
        "xp_to_next_level": xp_to_next_level(user.level),
        "updated_at": user.updated_at,
    }


def ensure_user(db: OrmSession, user_id: str, username: str | None = None) -> User:
    """Fetch the player row inside *db*, creating a level 1 player if needed."""
    user = db.get(User, user_id)
    if user is None:
        user = User(
            user_id=user_id,
            username=username or DEFAULT_USERNAME,
            level=1,
            xp=0,
        )
        db.add(user)
        db.flush()
        logger.info("Created player %s", user_id)
    return user


def get_or_create_user(user_id: str, username: str = DEFAULT_USERNAME) -> dict:
    data = validate_user(user_id, username)
    try:
        with get_session() as db:
            return user_to_dict(ensure_user(db, data.user_id, data.username))
    except SQLAlchemyError as exc:
        logger.exception("get_or_create_user failed for %s", user_id)
        raise PersistenceError("Failed to get or create user") from exc


def get_user(user_id: str) -> dict:
    try:
        with get_session() as db:
            user = db.get(User, user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            return user_to_dict(user)
    except SQLAlchemyError as exc:
        logger.exception("get_user failed for %s", user_id)
        raise PersistenceError("Failed to load user") from exc


def get_progress(user_id: str) -> dict:
    """``{level, xp, xp_to_next_level}``; unknown users start at level 1."""
    try:
        with get_session() as db:
            user = db.get(User, user_id)
            level, xp = (user.level, user.xp) if user else (1, 0)
    except SQLAlchemyError as exc:
        logger.exception("get_progress failed for %s", user_id)
        raise PersistenceError("Failed to load progress") from exc
    return {"level": level, "xp": xp, "xp_to_next_level": xp_to_next_level(level)}
