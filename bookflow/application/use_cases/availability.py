from __future__ import annotations

import logging
from datetime import date

from bookflow.application.ports.appointment_repository import AppointmentRepositoryPort
from bookflow.application.ports.schedules import BranchSchedulePort, StaffSchedulePort
from bookflow.application.scheduling.policy import resolve_window
from bookflow.application.scheduling.slots import DEFAULT_GRANULARITY, compute_slots
from bookflow.application.utils.time_math import day_bounds, weekday_name
from bookflow.domain.entities.interval import TimeWindow
from bookflow.domain.entities.slot import Slot
from bookflow.domain.entities.staff_selection import AnyStaff, StaffSelection


class AvailabilityUseCase:
    def __init__(
        self,
        appointments: AppointmentRepositoryPort,
        branch_schedules: BranchSchedulePort,
        staff_schedules: StaffSchedulePort,
        fallback_window: TimeWindow,
        granularity: int = DEFAULT_GRANULARITY,
        default_busy_duration: int = 60,
        respect_branch_closures: bool = False,
    ) -> None:
        self._appointments = appointments
        self._branch_schedules = branch_schedules
        self._staff_schedules = staff_schedules
        self._fallback_window = fallback_window
        self._granularity = granularity
        self._default_busy_duration = default_busy_duration
        self._respect_branch_closures = respect_branch_closures
        self._logger = logging.getLogger(__name__)

    async def get_slots(
        self,
        company_id: str,
        branch_id: str,
        staff: StaffSelection,
        day: date,
        service_duration: int,
        granularity: int | None = None,
    ) -> list[Slot]:
        step = granularity if granularity and granularity > 0 else self._granularity

        if isinstance(staff, AnyStaff):
            # No individual calendar to consult; assignment happens after creation.
            return compute_slots(self._fallback_window, service_duration, [], staff, step)

        weekday = weekday_name(day)
        branch_hours = await self._branch_schedules.get_hours(company_id, branch_id, weekday)
        staff_hours = await self._staff_schedules.get_hours(staff.staff_id, weekday)
        window = resolve_window(
            branch_hours,
            staff_hours,
            self._fallback_window,
            respect_branch_closures=self._respect_branch_closures,
        )

        range_start, range_end = day_bounds(day)
        busy = await self._appointments.list_busy(staff.staff_id, range_start, range_end)

        slots = compute_slots(
            window,
            service_duration,
            busy,
            staff,
            step,
            default_busy_duration=self._default_busy_duration,
        )
        self._logger.info(
            "Slots computed",
            extra={
                "staff_id": staff.staff_id,
                "branch_id": branch_id,
                "weekday": weekday,
                "slot_count": len(slots),
                "busy_count": len(busy),
            },
        )
        return slots
