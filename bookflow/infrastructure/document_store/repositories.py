from __future__ import annotations

import logging
from datetime import datetime

from bookflow.application.exceptions import NetworkError, NotFoundError
from bookflow.application.ports.appointment_repository import AppointmentRepositoryPort
from bookflow.application.ports.booking_link import BookingLinkPort
from bookflow.application.ports.schedules import BranchSchedulePort, StaffSchedulePort
from bookflow.application.ports.service_catalog import ServiceCatalogPort
from bookflow.domain.entities.appointment import AppointmentSnapshot, BusyInterval
from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.service_catalog import Service
from bookflow.domain.entities.working_hours import DayHours, StaffDayHours, Unscheduled
from bookflow.infrastructure.document_store.client import DocumentStoreClient
from bookflow.infrastructure.document_store.mapping import (
    branch_day_hours,
    busy_from_doc,
    link_from_doc,
    service_from_doc,
    snapshot_to_doc,
    staff_day_hours,
)


class DocumentAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def list_busy(self, staff_id: str, range_start: datetime, range_end: datetime) -> list[BusyInterval]:
        data = await self._client.get(
            "/appointments",
            params={"staffId": staff_id, "from": range_start.isoformat(), "to": range_end.isoformat()},
        )
        busy: list[BusyInterval] = []
        for doc in (data or {}).get("documents", []):
            interval = busy_from_doc(doc)
            if interval is None:
                self._logger.warning("Skipping appointment without start time", extra={"staff_id": staff_id})
                continue
            busy.append(interval)
        return busy

    async def create(self, snapshot: AppointmentSnapshot) -> str:
        data = await self._client.post("/appointments", snapshot_to_doc(snapshot))
        appointment_id = (data or {}).get("id")
        if not appointment_id:
            raise NetworkError("No appointment ID returned from document store")
        self._logger.info("Appointment stored", extra={"appointment_id": appointment_id})
        return str(appointment_id)


class DocumentBranchSchedules(BranchSchedulePort):
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client

    async def get_hours(self, company_id: str, branch_id: str, weekday: str) -> DayHours | None:
        doc = await self._client.get(f"/companies/{company_id}/branches/{branch_id}")
        return branch_day_hours(doc or {}, weekday)


class DocumentStaffSchedules(StaffSchedulePort):
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client

    async def get_hours(self, staff_id: str, weekday: str) -> StaffDayHours | Unscheduled:
        doc = await self._client.get(f"/staff/{staff_id}")
        return staff_day_hours(doc or {}, weekday)


class DocumentServiceCatalog(ServiceCatalogPort):
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client

    async def get_services(self, company_id: str, branch_id: str | None) -> list[Service]:
        params = {"branchId": branch_id} if branch_id else None
        data = await self._client.get(f"/companies/{company_id}/services", params=params)
        return [service_from_doc(doc) for doc in (data or {}).get("documents", [])]


class DocumentBookingLinks(BookingLinkPort):
    def __init__(self, client: DocumentStoreClient) -> None:
        self._client = client

    async def get_link(self, company_slug: str, link_slug: str) -> BookingLink:
        doc = await self._client.get(f"/links/{company_slug}/{link_slug}")
        link = link_from_doc(doc or {})
        if not link.is_active:
            raise NotFoundError(f"Booking link {company_slug}/{link_slug} is not active")
        return link
