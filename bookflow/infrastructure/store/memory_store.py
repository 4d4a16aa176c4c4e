from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from bookflow.application.exceptions import ConflictError, NotFoundError
from bookflow.application.ports.appointment_repository import AppointmentRepositoryPort
from bookflow.application.ports.booking_link import BookingLinkPort
from bookflow.application.ports.schedules import BranchSchedulePort, StaffSchedulePort
from bookflow.application.ports.service_catalog import ServiceCatalogPort
from bookflow.application.scheduling.conflicts import is_occupied
from bookflow.application.utils.time_math import parse_clock
from bookflow.domain.entities.appointment import AppointmentSnapshot, AppointmentStatus, BusyInterval
from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.interval import Interval
from bookflow.domain.entities.service_catalog import Service
from bookflow.domain.entities.working_hours import DayHours, StaffDayHours, Unscheduled
from bookflow.infrastructure.document_store.mapping import (
    appointment_date,
    branch_day_hours,
    busy_from_doc,
    link_from_doc,
    service_from_doc,
    snapshot_to_doc,
    staff_day_hours,
)


class MemoryDirectory:
    """Documents held in process, shaped like the hosted store's documents."""

    def __init__(self) -> None:
        self.links: dict[tuple[str, str], dict[str, Any]] = {}
        self.branches: dict[tuple[str, str], dict[str, Any]] = {}
        self.staff: dict[str, dict[str, Any]] = {}
        self.services: list[dict[str, Any]] = []
        self.appointments: dict[str, dict[str, Any]] = {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemoryDirectory:
        directory = cls()
        for doc in data.get("links", []):
            directory.links[(doc["companySlug"], doc["slug"])] = doc
        for doc in data.get("branches", []):
            directory.branches[(doc["companyId"], doc["id"])] = doc
        for doc in data.get("staff", []):
            directory.staff[doc["id"]] = doc
        directory.services.extend(data.get("services", []))
        for index, doc in enumerate(data.get("appointments", []), start=1):
            appointment_id = str(doc.get("id") or f"seed_{index}")
            directory.appointments[appointment_id] = {**doc, "id": appointment_id}
        return directory

    @classmethod
    def from_seed(cls, path: str | Path) -> MemoryDirectory:
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


class MemoryAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self, directory: MemoryDirectory | None = None) -> None:
        self._directory = directory or MemoryDirectory()
        self._logger = logging.getLogger(__name__)

    async def list_busy(self, staff_id: str, range_start: datetime, range_end: datetime) -> list[BusyInterval]:
        busy: list[BusyInterval] = []
        for doc in self._directory.appointments.values():
            if doc.get("staffId") != staff_id:
                continue
            day = appointment_date(doc)
            if day is None or not (range_start.date() <= day <= range_end.date()):
                continue
            interval = busy_from_doc(doc)
            if interval is not None:
                busy.append(interval)
        return busy

    async def create(self, snapshot: AppointmentSnapshot) -> str:
        doc = snapshot_to_doc(snapshot)

        if snapshot.staff_id is not None:
            candidate = Interval(start=parse_clock(snapshot.start_time), duration=snapshot.duration)
            taken = [
                busy
                for appointment_id, existing in self._directory.appointments.items()
                if appointment_id != snapshot.reschedule_of
                and existing.get("staffId") == snapshot.staff_id
                and appointment_date(existing) == snapshot.date
                and (busy := busy_from_doc(existing)) is not None
            ]
            if is_occupied(candidate, taken):
                raise ConflictError(f"{snapshot.start_time} is no longer available")

        appointment_id = uuid.uuid4().hex
        self._directory.appointments[appointment_id] = {**doc, "id": appointment_id}

        previous = self._directory.appointments.get(snapshot.reschedule_of or "")
        if previous is not None:
            previous["status"] = AppointmentStatus.rescheduled.value

        self._logger.info(
            "Memory appointment created",
            extra={
                "appointment_id": appointment_id,
                "staff_id": snapshot.staff_id,
                "start": snapshot.start_time,
                "end": snapshot.end_time,
            },
        )
        return appointment_id


class MemoryBranchSchedules(BranchSchedulePort):
    def __init__(self, directory: MemoryDirectory) -> None:
        self._directory = directory

    async def get_hours(self, company_id: str, branch_id: str, weekday: str) -> DayHours | None:
        doc = self._directory.branches.get((company_id, branch_id))
        if doc is None:
            raise NotFoundError(f"Branch {branch_id} not found")
        return branch_day_hours(doc, weekday)


class MemoryStaffSchedules(StaffSchedulePort):
    def __init__(self, directory: MemoryDirectory) -> None:
        self._directory = directory

    async def get_hours(self, staff_id: str, weekday: str) -> StaffDayHours | Unscheduled:
        doc = self._directory.staff.get(staff_id)
        if doc is None:
            raise NotFoundError(f"Staff {staff_id} not found")
        return staff_day_hours(doc, weekday)


class MemoryServiceCatalog(ServiceCatalogPort):
    def __init__(self, directory: MemoryDirectory) -> None:
        self._directory = directory

    async def get_services(self, company_id: str, branch_id: str | None) -> list[Service]:
        return [
            service_from_doc(doc)
            for doc in self._directory.services
            if doc.get("companyId") == company_id
            and doc.get("active", True)
            and (not branch_id or not doc.get("branchIds") or branch_id in doc["branchIds"])
        ]


class MemoryBookingLinks(BookingLinkPort):
    def __init__(self, directory: MemoryDirectory) -> None:
        self._directory = directory

    async def get_link(self, company_slug: str, link_slug: str) -> BookingLink:
        doc = self._directory.links.get((company_slug, link_slug))
        if doc is None or not doc.get("isActive", True):
            raise NotFoundError(f"Booking link {company_slug}/{link_slug} not found")
        return link_from_doc(doc)
