from __future__ import annotations

import re
from datetime import date, datetime, time

from bookflow.application.exceptions import ParseError
from bookflow.domain.entities.interval import Interval

MINUTES_PER_DAY = 24 * 60

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def overlaps(a: Interval, b: Interval) -> bool:
    """Half-open overlap test: touching endpoints do not overlap."""
    return max(a.start, b.start) < min(a.end, b.end)


def to_clock(minutes: int) -> str:
    """Format minutes since midnight as HH:MM."""
    if minutes < 0:
        raise ValueError(f"minutes must be >= 0, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_clock(value: str) -> int:
    """Parse an HH:MM string into minutes since midnight. 24:00 is accepted as end of day."""
    if not isinstance(value, str):
        raise ParseError(f"Expected HH:MM string, got {type(value).__name__}")

    match = _CLOCK_PATTERN.match(value)
    if not match:
        raise ParseError(f"Malformed time '{value}', expected HH:MM")

    hour = int(match.group(1))
    minute = int(match.group(2))
    if minute > 59 or hour > 24 or (hour == 24 and minute != 0):
        raise ParseError(f"Time out of range: '{value}'")

    return hour * 60 + minute


def weekday_name(day: date) -> str:
    return day.strftime("%A").lower()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Start and end instants of a local calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)
