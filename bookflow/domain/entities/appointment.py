from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    arrived = "arrived"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"
    rescheduled = "rescheduled"


OCCUPYING_STATUSES = frozenset(
    {
        AppointmentStatus.pending,
        AppointmentStatus.confirmed,
        AppointmentStatus.arrived,
        AppointmentStatus.in_progress,
    }
)


@dataclass(frozen=True)
class BusyInterval:
    start: int
    duration: int | None
    status: AppointmentStatus = AppointmentStatus.pending

    @property
    def is_occupying(self) -> bool:
        return self.status in OCCUPYING_STATUSES


@dataclass(frozen=True)
class AppointmentServiceLine:
    service_id: str
    service_name: str
    duration: int
    price: float


@dataclass(frozen=True)
class AppointmentSnapshot:
    company_id: str
    branch_id: str
    staff_id: str | None  # None when any specialist may be assigned
    client_name: str
    client_phone: str
    client_email: str
    services: tuple[AppointmentServiceLine, ...]
    date: date
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    duration: int
    total_price: float
    status: AppointmentStatus = AppointmentStatus.pending
    source: str = "online"
    notes: str = ""
    booking_link_id: str | None = None
    reschedule_of: str | None = None


@dataclass(frozen=True)
class BookingConfirmation:
    appointment_id: str
    snapshot: AppointmentSnapshot
    created: bool = True  # False when an earlier create is reported again
