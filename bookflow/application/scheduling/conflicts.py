from __future__ import annotations

from collections.abc import Iterable, Sequence

from bookflow.application.utils.time_math import overlaps
from bookflow.domain.entities.appointment import BusyInterval
from bookflow.domain.entities.interval import Interval

DEFAULT_BUSY_DURATION = 60


def occupying(busy: Iterable[BusyInterval]) -> list[BusyInterval]:
    """Keep only bookings whose status blocks the calendar."""
    return [b for b in busy if b.is_occupying]


def busy_as_interval(busy: BusyInterval, default_duration: int = DEFAULT_BUSY_DURATION) -> Interval:
    # Bookings stored without a usable duration block one default-length hour.
    duration = busy.duration if busy.duration and busy.duration > 0 else default_duration
    return Interval(start=busy.start, duration=duration)


def blocked_intervals(
    busy: Iterable[BusyInterval],
    default_duration: int = DEFAULT_BUSY_DURATION,
) -> list[Interval]:
    return [busy_as_interval(b, default_duration) for b in occupying(busy)]


def overlaps_any(candidate: Interval, blocked: Sequence[Interval]) -> bool:
    return any(overlaps(candidate, b) for b in blocked)


def is_occupied(
    candidate: Interval,
    busy: Iterable[BusyInterval],
    default_duration: int = DEFAULT_BUSY_DURATION,
) -> bool:
    return overlaps_any(candidate, blocked_intervals(busy, default_duration))
