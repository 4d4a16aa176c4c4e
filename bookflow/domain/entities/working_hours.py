from __future__ import annotations

from dataclasses import dataclass


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class DayHours:
    """Branch operating hours for one weekday. Times are "HH:MM" strings."""

    is_open: bool
    open_time: str | None = None
    close_time: str | None = None


@dataclass(frozen=True)
class StaffDayHours:
    enabled: bool
    start: str | None = None
    end: str | None = None


class Unscheduled:
    """Staff member has no working-hours schedule configured at all."""

    _instance: Unscheduled | None = None

    def __new__(cls) -> Unscheduled:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSCHEDULED"


UNSCHEDULED = Unscheduled()
