"""Request models for the backend operations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictInt, ValidationError

from ..errors import ValidationFailedError


class SessionCreate(BaseModel):
    """Body of a session submission."""

    mode: Literal["daily", "endless"]
    wpm: StrictInt = Field(ge=0)
    total_words: StrictInt = Field(ge=0)
    correct_words: StrictInt = Field(ge=0)
    incorrect_words: StrictInt = Field(ge=0)


class UserCreate(BaseModel):
    user_id: str = Field(min_length=1, max_length=64)
    username: str = Field(min_length=1, max_length=64)


def _failed(exc: ValidationError) -> ValidationFailedError:
    details = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return ValidationFailedError("Validation failed", details)


def validate_session(payload: dict | SessionCreate) -> SessionCreate:
    """Parse *payload* or raise :class:`ValidationFailedError`."""
    if isinstance(payload, SessionCreate):
        return payload
    try:
        return SessionCreate.model_validate(payload)
    except ValidationError as exc:
        raise _failed(exc) from exc


def validate_user(user_id: str, username: str) -> UserCreate:
    try:
        return UserCreate(user_id=user_id, username=username)
    except ValidationError as exc:
        raise _failed(exc) from exc
