# pomotask/utils/time_utils.py
"""
Timestamp helpers shared by the task model and the task file codec.
Nothing in here holds state.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser


def now_utc() -> datetime:
    """
    Return current time as UTC-aware datetime.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC-aware datetime.
    - If dt is naïve, interpret it as UTC.
    - If dt is aware, convert from its tzinfo to UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def elapsed_between(start: datetime, end: Optional[datetime], now: datetime) -> timedelta:
    """
    Duration from start to end, using `now` as a provisional end while
    end is None. Can be negative if the clock went backwards.
    """
    return (end if end is not None else now) - start


def minutes(value: int) -> timedelta:
    return timedelta(minutes=value)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into a UTC-aware datetime.
    - Accepts 'Z' or numeric offsets.
    - Fractional seconds beyond microseconds (nanosecond precision) are truncated.
    - A string without offset is taken as UTC.
    Raises ValueError on anything else.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected a timestamp string, got {value!r}")
    try:
        dt = date_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid RFC3339 timestamp '{value}': {e}")
    return to_utc(dt)


def format_rfc3339(dt: datetime) -> str:
    """
    Format a datetime as an RFC3339 UTC string with a 'Z' suffix,
    e.g. 2024-03-01T09:15:00.123456Z
    """
    return to_utc(dt).isoformat().replace("+00:00", "Z")


def whole_minutes(delta: timedelta) -> int:
    """
    Number of whole minutes in a duration, truncated toward zero
    (-5m30s is -5, not -6).
    """
    return int(delta.total_seconds() / 60)


def format_countdown(delta: timedelta) -> str:
    """
    Render a remaining duration as '12m 05s'. Overdue durations keep
    their sign on the minutes and seconds: '-3m -20s'.
    """
    total = int(delta.total_seconds())
    mins = int(total / 60)
    secs = total - mins * 60
    return f"{mins}m {secs:02d}s"
