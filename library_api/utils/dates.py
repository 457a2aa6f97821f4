"""
Date and time helpers.

All timestamps are produced in UTC. Report columns are plain calendar
dates (YYYY-MM-DD) taken from the UTC timestamp.
"""

from datetime import date, datetime, time, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def previous_month_range(today: date) -> tuple[datetime, datetime]:
    """
    First and last instant of the calendar month before `today`.

    Examples:
        2026-10-19 → (2026-09-01 00:00:00, 2026-09-30 23:59:59.999999)
        2026-01-05 → (2025-12-01 00:00:00, 2025-12-31 23:59:59.999999)
    """
    last_day = today.replace(day=1) - timedelta(days=1)
    first_day = last_day.replace(day=1)
    return start_of_day(first_day), end_of_day(last_day)


def format_date(value: datetime | None) -> str | None:
    """
    Format a timestamp as YYYY-MM-DD in UTC.

    Naive values (SQLite drops the offset) are assumed to already be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()
