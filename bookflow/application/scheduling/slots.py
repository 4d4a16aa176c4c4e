from __future__ import annotations

from collections.abc import Iterable, Sequence

from bookflow.application.scheduling.conflicts import DEFAULT_BUSY_DURATION, blocked_intervals, overlaps_any
from bookflow.domain.entities.appointment import BusyInterval
from bookflow.domain.entities.interval import Interval, TimeWindow
from bookflow.domain.entities.slot import DayPeriod, Slot
from bookflow.domain.entities.staff_selection import AnyStaff, SpecificStaff, StaffSelection

DEFAULT_GRANULARITY = 30


def compute_slots(
    window: TimeWindow,
    service_duration: int,
    busy: Sequence[BusyInterval],
    staff: StaffSelection,
    granularity: int = DEFAULT_GRANULARITY,
    default_busy_duration: int = DEFAULT_BUSY_DURATION,
) -> list[Slot]:
    """
    Walk the window in fixed steps and emit every start that fits the service.
    With AnyStaff every slot is available: no single calendar is checked.
    """
    if granularity <= 0:
        raise ValueError(f"granularity must be > 0, got {granularity}")
    if service_duration <= 0:
        raise ValueError(f"service_duration must be > 0, got {service_duration}")
    if window.is_empty:
        return []

    staff_id = staff.staff_id if isinstance(staff, SpecificStaff) else None
    blocked = blocked_intervals(busy, default_busy_duration)

    slots: list[Slot] = []
    current = window.open
    while current + service_duration <= window.close:
        if isinstance(staff, AnyStaff):
            available = True
        else:
            available = not overlaps_any(Interval(start=current, duration=service_duration), blocked)
        slots.append(Slot(start=current, available=available, staff_id=staff_id))
        current += granularity

    return slots


def filter_slots(
    slots: Iterable[Slot],
    periods: Iterable[DayPeriod] | None = None,
    available_only: bool = False,
) -> list[Slot]:
    allowed = set(periods) if periods is not None else None
    return [
        s
        for s in slots
        if (allowed is None or s.period in allowed) and (s.available or not available_only)
    ]


def group_by_period(slots: Iterable[Slot]) -> dict[DayPeriod, list[Slot]]:
    grouped: dict[DayPeriod, list[Slot]] = {period: [] for period in DayPeriod}
    for slot in slots:
        grouped[slot.period].append(slot)
    return grouped
