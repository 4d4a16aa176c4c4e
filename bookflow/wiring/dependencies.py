from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from bookflow.application.ports.appointment_repository import AppointmentRepositoryPort
from bookflow.application.ports.booking_link import BookingLinkPort
from bookflow.application.ports.notification import NotificationPort
from bookflow.application.ports.schedules import BranchSchedulePort, StaffSchedulePort
from bookflow.application.ports.service_catalog import ServiceCatalogPort
from bookflow.application.scheduling.policy import default_window
from bookflow.application.use_cases.availability import AvailabilityUseCase
from bookflow.application.use_cases.booking_flow import BookingFlowController
from bookflow.application.use_cases.notify import NotifyBookingUseCase
from bookflow.core.config import settings
from bookflow.infrastructure.document_store.client import DocumentStoreClient
from bookflow.infrastructure.document_store.repositories import (
    DocumentAppointmentRepository,
    DocumentBookingLinks,
    DocumentBranchSchedules,
    DocumentServiceCatalog,
    DocumentStaffSchedules,
)
from bookflow.infrastructure.notifications.log_notifier import LogNotifier
from bookflow.infrastructure.store.memory_store import (
    MemoryAppointmentRepository,
    MemoryBookingLinks,
    MemoryBranchSchedules,
    MemoryDirectory,
    MemoryServiceCatalog,
    MemoryStaffSchedules,
)
from bookflow.infrastructure.store.session_store import MemorySessionStore


@dataclass(frozen=True)
class Backends:
    appointments: AppointmentRepositoryPort
    branch_schedules: BranchSchedulePort
    staff_schedules: StaffSchedulePort
    catalog: ServiceCatalogPort
    links: BookingLinkPort


def _use_memory_backends() -> bool:
    return not settings.DOCUMENT_STORE_BASE_URL or settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_backends() -> Backends:
    logger = logging.getLogger(__name__)
    if _use_memory_backends():
        directory = (
            MemoryDirectory.from_seed(settings.SEED_DATA_PATH) if settings.SEED_DATA_PATH else MemoryDirectory()
        )
        logger.info("Using in-memory backends (ENV=%s)", settings.ENV)
        return Backends(
            appointments=MemoryAppointmentRepository(directory),
            branch_schedules=MemoryBranchSchedules(directory),
            staff_schedules=MemoryStaffSchedules(directory),
            catalog=MemoryServiceCatalog(directory),
            links=MemoryBookingLinks(directory),
        )

    logger.info("Using document store backends")
    client = DocumentStoreClient()
    return Backends(
        appointments=DocumentAppointmentRepository(client),
        branch_schedules=DocumentBranchSchedules(client),
        staff_schedules=DocumentStaffSchedules(client),
        catalog=DocumentServiceCatalog(client),
        links=DocumentBookingLinks(client),
    )


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


def get_notifier() -> NotificationPort:
    return LogNotifier()


def get_availability_use_case(backends: Backends | None = None) -> AvailabilityUseCase:
    backends = backends or get_backends()
    return AvailabilityUseCase(
        appointments=backends.appointments,
        branch_schedules=backends.branch_schedules,
        staff_schedules=backends.staff_schedules,
        fallback_window=default_window(settings.DEFAULT_OPEN_TIME, settings.DEFAULT_CLOSE_TIME),
        granularity=settings.SLOT_GRANULARITY_MINUTES,
        default_busy_duration=settings.DEFAULT_BUSY_DURATION_MINUTES,
        respect_branch_closures=settings.RESPECT_BRANCH_CLOSURES,
    )


def create_booking_flow(session_id: str, backends: Backends | None = None) -> BookingFlowController:
    backends = backends or get_backends()
    return BookingFlowController(
        availability=get_availability_use_case(backends),
        appointments=backends.appointments,
        catalog=backends.catalog,
        default_service_duration=settings.DEFAULT_SERVICE_DURATION_MINUTES,
        session_id=session_id,
    )


def get_notify_use_case() -> NotifyBookingUseCase:
    return NotifyBookingUseCase(notifier=get_notifier())
