"""Hour-granularity parsing and formatting helpers."""

from __future__ import annotations

import re
from datetime import date, datetime

from booking_engine.domain.constraints import InvalidDate, InvalidPolicy, InvalidTimeFormat


_HOUR_PATTERN = re.compile(r"(?P<hour>\d{1,2}):(?P<minute>\d{2})")
_DATE_FORMAT = "%Y-%m-%d"
MINUTES_PER_HOUR = 60


def parse_hour(text: str) -> int:
    """Parse a whole-hour ``HH:00`` string into an hour in 0-23."""
    if not isinstance(text, str):
        raise InvalidTimeFormat(f"time must be a string, got {type(text).__name__}")
    match = _HOUR_PATTERN.fullmatch(text.strip())
    if match is None:
        raise InvalidTimeFormat(f"time {text!r} must follow HH:MM format")
    if match.group("minute") != "00":
        raise InvalidTimeFormat(f"time {text!r} must be a whole hour (HH:00)")
    hour = int(match.group("hour"))
    if not 0 <= hour <= 23:
        raise InvalidTimeFormat(f"time {text!r} hour must be between 0 and 23")
    return hour


def format_hour_24(hour: int) -> str:
    return f"{hour:02d}:00"


def format_hour_12(hour: int) -> str:
    display_hour = hour % 12 or 12
    suffix = "AM" if hour % 24 < 12 else "PM"
    return f"{display_hour}:00 {suffix}"


def to_cooldown_hours(minutes: int) -> float:
    # Unrounded: 90 minutes must block until x.5, not x or x+1.
    if minutes < 0:
        raise InvalidPolicy("cooldown minutes must be >= 0")
    return minutes / MINUTES_PER_HOUR


def parse_date(text: str) -> date:
    if isinstance(text, datetime):
        return text.date()
    if isinstance(text, date):
        return text
    try:
        return datetime.strptime(str(text).strip(), _DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDate(f"date {text!r} must follow YYYY-MM-DD format") from exc


def format_date(value: date) -> str:
    return value.strftime(_DATE_FORMAT)


def day_of_week(value: date) -> int:
    """Weekday number with 0 = Sunday ... 6 = Saturday, as stored in place schedules."""
    return (value.weekday() + 1) % 7
