from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DayPeriod(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


NOON = 12 * 60
EVENING_START = 17 * 60


@dataclass(frozen=True)
class Slot:
    start: int
    available: bool
    staff_id: str | None = None

    @property
    def time(self) -> str:
        return f"{self.start // 60:02d}:{self.start % 60:02d}"

    @property
    def period(self) -> DayPeriod:
        if self.start < NOON:
            return DayPeriod.morning
        if self.start < EVENING_START:
            return DayPeriod.afternoon
        return DayPeriod.evening
