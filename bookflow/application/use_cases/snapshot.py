from __future__ import annotations

from collections.abc import Sequence

from bookflow.application.exceptions import ValidationError
from bookflow.application.utils.time_math import to_clock
from bookflow.domain.entities.appointment import AppointmentServiceLine, AppointmentSnapshot
from bookflow.domain.entities.booking_session import BookingSession
from bookflow.domain.entities.booking_step import BookingStep
from bookflow.domain.entities.service_catalog import Service
from bookflow.domain.entities.staff_selection import SpecificStaff

DEFAULT_SERVICE_DURATION = 30

_REQUIRED_BY_STEP: dict[BookingStep, tuple[str, ...]] = {
    BookingStep.branch: ("branch_id",),
    BookingStep.service: ("service_ids",),
    BookingStep.staff: ("staff",),
    BookingStep.datetime: ("date", "time"),
    BookingStep.info: ("customer_name", "customer_phone"),
}


def missing_fields(session: BookingSession, step: BookingStep) -> list[str]:
    """Fields the customer still has to provide before leaving a step."""
    if step == BookingStep.confirmation:
        required = ("link", "branch_id", "service_ids", "staff", "date", "time", "customer_name", "customer_phone")
    else:
        required = _REQUIRED_BY_STEP.get(step, ())

    missing = []
    for name in required:
        value = getattr(session, name)
        if value is None or value == () or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def require_complete(session: BookingSession, step: BookingStep) -> None:
    missing = missing_fields(session, step)
    if missing:
        raise ValidationError(f"Missing booking information: {', '.join(missing)}", missing=missing)


def total_duration(services: Sequence[Service], default: int = DEFAULT_SERVICE_DURATION) -> int:
    return sum(s.duration_minutes for s in services) or default


def selected_services(session: BookingSession, catalog: Sequence[Service]) -> list[Service]:
    by_id = {s.id: s for s in catalog}
    return [by_id[service_id] for service_id in session.service_ids if service_id in by_id]


def build_snapshot(
    session: BookingSession,
    services: Sequence[Service],
    default_duration: int = DEFAULT_SERVICE_DURATION,
) -> AppointmentSnapshot:
    """Assemble the create payload: durations summed, end from start + total, price totaled."""
    require_complete(session, BookingStep.confirmation)

    duration = total_duration(services, default_duration)
    lines = tuple(
        AppointmentServiceLine(
            service_id=s.id,
            service_name=s.name,
            duration=s.duration_minutes,
            price=s.price,
        )
        for s in services
    )

    return AppointmentSnapshot(
        company_id=session.link.company_id,
        branch_id=session.branch_id,
        staff_id=session.staff.staff_id if isinstance(session.staff, SpecificStaff) else None,
        client_name=session.customer_name.strip(),
        client_phone=session.customer_phone.strip(),
        client_email=session.customer_email or "",
        services=lines,
        date=session.date,
        start_time=to_clock(session.time),
        end_time=to_clock(session.time + duration),
        duration=duration,
        total_price=sum(s.price for s in services),
        notes=session.notes or "",
        booking_link_id=session.link.id,
        reschedule_of=session.reschedule.old_appointment_id if session.reschedule else None,
    )
