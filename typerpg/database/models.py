"""SQLAlchemy ORM models for Typing RPG."""

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores datetimes without tzinfo)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class User(Base):
    """Permanent player data: one row per authenticated user."""

    __tablename__ = "users"

    user_id = Column(String(64), primary_key=True)
    username = Column(String(64), nullable=False)
    level = Column(Integer, nullable=False, default=1)
    xp = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<User id={self.user_id} level={self.level} xp={self.xp}>"
        )


class GameSession(Base):
    """One submitted typing attempt.  Append-only."""

    __tablename__ = "game_sessions"
    __table_args__ = (
        # At most one daily session per user per UTC day.  Endless rows
        # leave daily_date NULL, which never collides.
        UniqueConstraint("user_id", "daily_date", name="uq_daily_once"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        String(64), ForeignKey("users.user_id"), nullable=False, index=True,
    )
    mode = Column(String(10), nullable=False)   # daily | endless
    wpm = Column(Integer, nullable=False)
    total_words = Column(Integer, nullable=False)
    correct_words = Column(Integer, nullable=False)
    incorrect_words = Column(Integer, nullable=False)
    xp_delta = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    daily_date = Column(Date, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "mode": self.mode,
            "wpm": self.wpm,
            "total_words": self.total_words,
            "correct_words": self.correct_words,
            "incorrect_words": self.incorrect_words,
            "xp_delta": self.xp_delta,
            "created_at": self.created_at,
        }

    def __repr__(self) -> str:
        return (
            f"<GameSession id={self.id} user={self.user_id} "
            f"mode={self.mode} wpm={self.wpm}>"
        )
