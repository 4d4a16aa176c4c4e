from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.staff_selection import StaffSelection


@dataclass(frozen=True)
class RescheduleInfo:
    old_appointment_id: str


@dataclass(frozen=True)
class RescheduleSource:
    """Data carried over from an appointment the customer is moving."""

    old_appointment_id: str
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    branch_id: str | None = None
    staff: StaffSelection | None = None
    service_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class BookingSession:
    link: BookingLink | None = None
    branch_id: str | None = None
    service_ids: tuple[str, ...] = ()
    staff: StaffSelection | None = None
    date: date | None = None
    time: int | None = None  # minutes since midnight of the chosen slot
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None
    reschedule: RescheduleInfo | None = None
