from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from bookflow.domain.entities.appointment import AppointmentSnapshot, BusyInterval


class AppointmentRepositoryPort(ABC):
    @abstractmethod
    async def list_busy(self, staff_id: str, range_start: datetime, range_end: datetime) -> list[BusyInterval]:
        """List bookings for a staff member whose date falls in [range_start, range_end]."""
        raise NotImplementedError

    @abstractmethod
    async def create(self, snapshot: AppointmentSnapshot) -> str:
        """Create appointment. Returns appointment_id."""
        raise NotImplementedError
