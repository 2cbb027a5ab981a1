"""Exceptions raised by the Typing RPG backend and surfaced to the client."""

from __future__ import annotations

from typing import Any


class TypeRPGError(Exception):
    """Base exception carrying a machine-readable reason."""

    reason = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly error body."""
        return {"success": False, "error": self.message, "reason": self.reason}


class ValidationFailedError(TypeRPGError):
    """Submitted fields are malformed or out of range."""

    reason = "validation_failed"

    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["details"] = self.details
        return body


class DailyAlreadyCompletedError(TypeRPGError):
    """The user already has a daily session inside the current UTC day."""

    reason = "daily_already_completed"

    def __init__(self, time_until_reset_seconds: int):
        super().__init__("Daily challenge already completed today")
        self.time_until_reset_seconds = time_until_reset_seconds

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["time_until_reset_seconds"] = self.time_until_reset_seconds
        return body


class UserNotFoundError(TypeRPGError):
    """No player row for the requested user id."""

    reason = "user_not_found"

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id!r} not found")
        self.user_id = user_id


class PersistenceError(TypeRPGError):
    """The store could not be read or written."""

    reason = "persistence_failed"
