"""Calendar-day helpers.

Every comparison between a log and "today" happens on calendar days in the
local timezone.  Time of day never matters once a value has passed through
``to_day``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

DAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: str | datetime | date) -> datetime:
    """Parse an ISO timestamp (``Z`` suffix allowed) into a naive local datetime."""
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time())
    return to_local_naive(datetime.fromisoformat(str(value).strip()))


def to_day(value: str | datetime | date) -> date:
    """Normalize a date, datetime or ISO string to its local calendar day."""
    if isinstance(value, datetime):
        return to_local_naive(value).date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return parse_datetime(text).date()


def local_today(now: datetime | None = None) -> date:
    """Return the local calendar day for ``now`` (defaults to the wall clock)."""
    return to_day(now or datetime.now())


def start_of_day(day: date) -> datetime:
    """Naive local midnight at the start of ``day``."""
    return datetime.combine(day, time())


def day_label(day: date) -> str:
    """Short weekday name, independent of the process locale."""
    return DAY_LABELS[day.isoweekday() % 7]


def days_back(today: date, count: int) -> list[date]:
    """``count`` consecutive days ending at ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
