"""Local-time helpers shared by the ledger and its rollups."""

from datetime import date, datetime, timedelta


def start_of_day(moment: datetime) -> datetime:
    """Truncate a timestamp to local midnight."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def most_recent_sunday(moment: datetime | None = None) -> datetime:
    """Midnight of the latest Sunday on or before ``moment``."""
    moment = moment or datetime.now()
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (moment.weekday() + 1) % 7
    return start_of_day(moment) - timedelta(days=days_since_sunday)


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed from ``earlier`` to ``later`` (floored)."""
    return (later - earlier) // timedelta(days=1)


def previous_day(day: date) -> date:
    return day - timedelta(days=1)
