"""UTC calendar-day arithmetic behind the once-per-day daily challenge."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

DAY = timedelta(days=1)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_day_window(now: datetime) -> tuple[datetime, datetime]:
    """``[day_start, day_end)`` of the UTC day containing *now*."""
    now = as_utc(now)
    day_start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    return day_start, day_start + DAY


def utc_date_string(now: datetime) -> str:
    """``YYYY-MM-DD`` of *now* in UTC."""
    return as_utc(now).date().isoformat()


def utc_date(now: datetime) -> date:
    return as_utc(now).date()


def seconds_until_reset(now: datetime) -> int:
    """Whole seconds until the next UTC midnight, never negative."""
    _, day_end = utc_day_window(now)
    return max(0, int((day_end - as_utc(now)).total_seconds()))


def in_current_day(moment: datetime | None, now: datetime) -> bool:
    """True when *moment* falls inside the UTC day containing *now*."""
    if moment is None:
        return False
    day_start, day_end = utc_day_window(now)
    return day_start <= as_utc(moment) < day_end
