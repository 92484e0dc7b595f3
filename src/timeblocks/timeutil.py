from __future__ import annotations

from datetime import date, datetime, time
import re

_HHMM_PATTERN = re.compile(r"\d{1,2}:\d{2}")


def parse_date_ymd(s: str) -> date:
    """Parse strict YYYY-MM-DD string into a date. Raises ValueError."""
    return datetime.strptime(s, "%Y-%m-%d").date()


def parse_time_hhmm(s: str) -> time:
    """Parse strict HH:MM (or H:MM) string into a time. Raises ValueError."""
    if not _HHMM_PATTERN.fullmatch(s):
        raise ValueError("Time must match HH:MM")

    hour_text, minute_text = s.split(":")
    hour = int(hour_text)
    minute = int(minute_text)

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError("Hour/minute out of range")

    return time(hour=hour, minute=minute)


def dt_to_str(dt: datetime) -> str:
    """Convert a datetime to an ISO-8601 string for snapshots."""
    return dt.isoformat()


def str_to_dt(s: str) -> datetime:
    """Parse an ISO-8601 string from a snapshot into a datetime."""
    return datetime.fromisoformat(s)
