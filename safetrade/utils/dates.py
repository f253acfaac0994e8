"""
Date helpers shared by repositories.

All timestamps are stored as naive UTC. Window boundaries are computed here
and bound as parameters so the same SQL runs on SQLite and MySQL.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """Current UTC time without tzinfo (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_today() -> datetime:
    return datetime.combine(utc_now().date(), time.min)


def days_ago(days: int) -> datetime:
    """Instant `days` days before now."""
    return utc_now() - timedelta(days=days)


def start_of_day(value: Union[date, datetime, str]) -> datetime:
    """Normalize a date filter's lower bound to midnight."""
    parsed = parse_date(value)
    return datetime.combine(parsed, time.min)


def end_of_day(value: Union[date, datetime, str]) -> datetime:
    """Exclusive upper bound for a date filter: midnight of the next day."""
    parsed = parse_date(value)
    return datetime.combine(parsed + timedelta(days=1), time.min)


def parse_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)[:10]).date()


def to_date_string(value) -> Optional[str]:
    """
    Render a grouped DATE() column as YYYY-MM-DD.

    MySQL returns date objects, SQLite returns strings.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


def to_datetime(value) -> Optional[datetime]:
    """Coerce a raw DB timestamp (datetime or ISO string) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as a bind parameter both SQLite and MySQL compare correctly."""
    if value is None:
        return None
    return value.strftime("%Y-%m-%d %H:%M:%S")


def iso(value) -> Optional[str]:
    """Serialize a DB timestamp for JSON responses."""
    parsed = to_datetime(value)
    return parsed.isoformat() if parsed else None
