"""
Conversions between hosted-store documents (camelCase, as the dashboard writes
them) and domain entities.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from bookflow.application.exceptions import ValidationError
from bookflow.application.utils.time_math import parse_clock
from bookflow.domain.entities.appointment import AppointmentSnapshot, AppointmentStatus, BusyInterval
from bookflow.domain.entities.booking_link import BookingLink, BranchSettings, LinkSettings
from bookflow.domain.entities.service_catalog import Service
from bookflow.domain.entities.working_hours import UNSCHEDULED, DayHours, StaffDayHours, Unscheduled


def link_from_doc(doc: dict[str, Any]) -> BookingLink:
    branch_doc = doc.get("branchSettings") or {}
    settings_doc = doc.get("settings") or {}
    return BookingLink(
        id=str(doc.get("id", "")),
        company_id=str(doc.get("companyId", "")),
        slug=str(doc.get("slug", "")),
        name=doc.get("name") or "",
        is_active=bool(doc.get("isActive", True)),
        branch_settings=BranchSettings(
            mode=branch_doc.get("mode") or "single",
            allowed_branches=tuple(branch_doc.get("allowedBranches") or ()),
            default_branch=branch_doc.get("defaultBranch"),
        ),
        settings=LinkSettings(
            time_slot_interval=settings_doc.get("timeSlotInterval"),
            allow_any_employee=settings_doc.get("allowAnyEmployee", True),
            show_morning_slots=settings_doc.get("showMorningSlots", True),
            show_afternoon_slots=settings_doc.get("showAfternoonSlots", True),
            show_evening_slots=settings_doc.get("showEveningSlots", True),
        ),
    )


def branch_day_hours(doc: dict[str, Any], weekday: str) -> DayHours | None:
    entry = (doc.get("operatingHours") or {}).get(weekday)
    if entry is None:
        return None
    return DayHours(
        is_open=bool(entry.get("isOpen", False)),
        open_time=entry.get("openTime"),
        close_time=entry.get("closeTime"),
    )


def staff_day_hours(doc: dict[str, Any], weekday: str) -> StaffDayHours | Unscheduled:
    schedule = doc.get("schedule") or {}
    working_hours = schedule.get("workingHours")
    if not working_hours:
        return UNSCHEDULED

    entry = working_hours.get(weekday)
    if entry is None:
        return StaffDayHours(enabled=False)

    # Older staff documents use isWorking/start/end instead of enabled/startTime/endTime.
    return StaffDayHours(
        enabled=bool(entry.get("enabled") or entry.get("isWorking")),
        start=entry.get("startTime") or entry.get("start"),
        end=entry.get("endTime") or entry.get("end"),
    )


def service_from_doc(doc: dict[str, Any]) -> Service:
    duration = doc.get("duration") or {}
    if isinstance(duration, dict):
        minutes = int(duration.get("hours") or 0) * 60 + int(duration.get("minutes") or 0)
    else:
        minutes = int(duration)
    return Service(
        id=str(doc["id"]),
        name=doc.get("name") or "",
        duration_minutes=minutes,
        price=float(doc.get("startingPrice") or 0),
    )


def busy_from_doc(doc: dict[str, Any]) -> BusyInterval | None:
    start_time = doc.get("startTime") or doc.get("time")
    if not start_time:
        return None
    try:
        status = AppointmentStatus(doc.get("status", AppointmentStatus.pending.value))
    except ValueError:
        return None
    return BusyInterval(
        start=parse_clock(start_time),
        duration=doc.get("duration") or doc.get("totalDuration"),
        status=status,
    )


def appointment_date(doc: dict[str, Any]) -> date | None:
    value = doc.get("date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return None


def snapshot_to_doc(snapshot: AppointmentSnapshot) -> dict[str, Any]:
    if not snapshot.client_name or not snapshot.client_phone:
        raise ValidationError("Appointment requires client name and phone", missing=["client_name", "client_phone"])

    return {
        "companyId": snapshot.company_id,
        "branchId": snapshot.branch_id,
        "staffId": snapshot.staff_id,
        "clientName": snapshot.client_name,
        "clientPhone": snapshot.client_phone,
        "clientEmail": snapshot.client_email,
        "services": [
            {
                "serviceId": line.service_id,
                "serviceName": line.service_name,
                "duration": line.duration,
                "price": line.price,
            }
            for line in snapshot.services
        ],
        "date": snapshot.date.isoformat(),
        "startTime": snapshot.start_time,
        "endTime": snapshot.end_time,
        "duration": snapshot.duration,
        "totalPrice": snapshot.total_price,
        "status": snapshot.status.value,
        "source": snapshot.source,
        "notes": snapshot.notes,
        "bookingLinkId": snapshot.booking_link_id,
        "rescheduleOf": snapshot.reschedule_of,
    }
