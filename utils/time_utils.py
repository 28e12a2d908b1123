"""
utils/time_utils.py

Purpose: Time helpers

- Istanbul local time (fixed UTC+3, no DST since 2016)
- Turkish date / timestamp formatting for bot messages
- UTC ISO timestamps for stored rows
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

ISTANBUL_TZ = timezone(timedelta(hours=3), name="TRT")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string, as stored in the database."""
    return utc_now().isoformat()


def to_istanbul(dt: datetime) -> datetime:
    """
    Converts a datetime to Istanbul time.
    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(ISTANBUL_TZ)


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Formats a timestamp the way Turkish users read it: "17.10.2026 14:05:09".
    Defaults to now.
    """
    dt = dt or utc_now()
    return to_istanbul(dt).strftime("%d.%m.%Y %H:%M:%S")


def format_date(dt: Optional[datetime]) -> str:
    """Date only, "17.10.2026"."""
    if not dt:
        return "-"
    return to_istanbul(dt).strftime("%d.%m.%Y")
