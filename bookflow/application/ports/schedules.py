from __future__ import annotations

from abc import ABC, abstractmethod

from bookflow.domain.entities.working_hours import DayHours, StaffDayHours, Unscheduled


class BranchSchedulePort(ABC):
    @abstractmethod
    async def get_hours(self, company_id: str, branch_id: str, weekday: str) -> DayHours | None:
        """Operating hours for the weekday, or None when the weekday is not specified."""
        raise NotImplementedError


class StaffSchedulePort(ABC):
    @abstractmethod
    async def get_hours(self, staff_id: str, weekday: str) -> StaffDayHours | Unscheduled:
        """
        Working hours for the weekday.
        Returns UNSCHEDULED when the staff member has no schedule at all and a
        disabled StaffDayHours when the schedule has no entry for the weekday.
        """
        raise NotImplementedError
