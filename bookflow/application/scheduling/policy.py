"""
Resolves the effective open window for one staff member on one date.

Precedence:
  1. staff without any schedule -> branch hours if open, else platform default
  2. staff scheduled but off that weekday -> branch hours if open, else platform default
  3. staff working that weekday -> staff hours, branch hours ignored
"""

from __future__ import annotations

import logging

from bookflow.application.utils.time_math import parse_clock
from bookflow.domain.entities.interval import TimeWindow
from bookflow.domain.entities.working_hours import DayHours, StaffDayHours, Unscheduled

logger = logging.getLogger(__name__)


def default_window(open_time: str = "09:00", close_time: str = "21:00") -> TimeWindow:
    return TimeWindow(open=parse_clock(open_time), close=parse_clock(close_time))


def resolve_window(
    branch_hours: DayHours | None,
    staff_hours: StaffDayHours | Unscheduled,
    fallback: TimeWindow,
    respect_branch_closures: bool = False,
) -> TimeWindow:
    if isinstance(staff_hours, StaffDayHours) and staff_hours.enabled:
        return TimeWindow(
            open=parse_clock(staff_hours.start) if staff_hours.start else fallback.open,
            close=parse_clock(staff_hours.end) if staff_hours.end else fallback.close,
        )

    if branch_hours is not None and branch_hours.is_open:
        return _branch_window(branch_hours, fallback)

    # Closed or unspecified branch day with no staff hours to fall back on.
    # Slots are still offered over the platform default window unless closures are respected.
    reason = "staff_unscheduled" if isinstance(staff_hours, Unscheduled) else "staff_off"
    if respect_branch_closures:
        logger.info("Branch closed, no window", extra={"reason": reason})
        return TimeWindow(open=fallback.open, close=fallback.open)

    logger.warning("Branch closed, falling back to default window", extra={"reason": reason})
    return fallback


def _branch_window(hours: DayHours, fallback: TimeWindow) -> TimeWindow:
    return TimeWindow(
        open=parse_clock(hours.open_time) if hours.open_time else fallback.open,
        close=parse_clock(hours.close_time) if hours.close_time else fallback.close,
    )
