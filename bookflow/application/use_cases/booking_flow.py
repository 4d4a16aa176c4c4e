from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from bookflow.application.exceptions import BookingError, ValidationError
from bookflow.application.ports.appointment_repository import AppointmentRepositoryPort
from bookflow.application.ports.service_catalog import ServiceCatalogPort
from bookflow.application.use_cases.availability import AvailabilityUseCase
from bookflow.application.use_cases.session import initial_session, merge_session
from bookflow.application.use_cases.snapshot import (
    DEFAULT_SERVICE_DURATION,
    build_snapshot,
    require_complete,
    selected_services,
    total_duration,
)
from bookflow.application.use_cases.steps import build_steps, reanchor
from bookflow.domain.entities.appointment import AppointmentSnapshot, BookingConfirmation
from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.booking_session import BookingSession, RescheduleSource
from bookflow.domain.entities.booking_step import BookingStep
from bookflow.domain.entities.slot import Slot
from bookflow.domain.entities.staff_selection import AnyStaff

# Changing any of these invalidates previously loaded slots.
_SLOT_INPUTS = frozenset({"link", "branch_id", "service_ids", "staff", "date"})


class BookingFlowController:
    """
    Owns one customer's booking attempt: the session, the step list and the
    create-appointment transition. All mutations go through this object.
    """

    def __init__(
        self,
        availability: AvailabilityUseCase,
        appointments: AppointmentRepositoryPort,
        catalog: ServiceCatalogPort,
        default_service_duration: int = DEFAULT_SERVICE_DURATION,
        session_id: str | None = None,
    ) -> None:
        self._availability = availability
        self._appointments = appointments
        self._catalog = catalog
        self._default_service_duration = default_service_duration
        self._session_id = session_id
        self._logger = logging.getLogger(__name__)

        self._session = BookingSession()
        self._steps = build_steps(None)
        self._index = 0
        self._slots: list[Slot] = []
        self._fetch_seq = 0
        self._generation = 0
        self._creating = False
        self._confirmation: BookingConfirmation | None = None
        self._last_error: BookingError | None = None

    @property
    def session(self) -> BookingSession:
        return self._session

    @property
    def steps(self) -> tuple[BookingStep, ...]:
        return self._steps

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_step(self) -> BookingStep:
        return self._steps[self._index]

    @property
    def slots(self) -> list[Slot]:
        return list(self._slots)

    @property
    def is_creating(self) -> bool:
        return self._creating

    @property
    def appointment_id(self) -> str | None:
        return self._confirmation.appointment_id if self._confirmation else None

    @property
    def snapshot(self) -> AppointmentSnapshot | None:
        return self._confirmation.snapshot if self._confirmation else None

    @property
    def last_error(self) -> BookingError | None:
        return self._last_error

    def start(
        self,
        link: BookingLink,
        branch_hint: str | None = None,
        saved_branch_id: str | None = None,
        reschedule: RescheduleSource | None = None,
    ) -> BookingStep:
        """Begin a booking attempt from a link, pre-filling what the link already decides."""
        self.reset()
        session, skip_branch_step = initial_session(link, branch_hint, saved_branch_id, reschedule)
        self._session = session
        self._steps = build_steps(link)
        if skip_branch_step:
            self.go_to_step(BookingStep.service)
        self._logger.info(
            "Booking flow started",
            extra={
                "session_id": self._session_id,
                "branch_id": session.branch_id,
                "step": self.current_step.value,
            },
        )
        return self.current_step

    def update(self, patch: Mapping[str, Any]) -> BookingSession:
        previous = self._session
        changes = dict(patch)
        merged = merge_session(previous, changes)
        if merged.date != previous.date and "time" not in changes:
            # A time picked for another day no longer applies.
            merged = merge_session(merged, {"time": None})
        self._session = merged

        if _SLOT_INPUTS & set(changes):
            self._slots = []
            # A fetch issued for the old inputs must not land after this change.
            self._fetch_seq += 1
        if "link" in changes and self._session.link != previous.link:
            new_steps = build_steps(self._session.link)
            self._index = reanchor(self._steps, self._index, new_steps)
            self._steps = new_steps
        return self._session

    def next(self) -> BookingStep:
        require_complete(self._session, self.current_step)
        session = self._session
        if (
            self.current_step == BookingStep.staff
            and isinstance(session.staff, AnyStaff)
            and session.link is not None
            and not session.link.settings.allow_any_employee
        ):
            raise ValidationError("This link requires choosing a specialist", missing=["staff"])
        if self.current_step == BookingStep.datetime and self._slots:
            available = {s.start for s in self._slots if s.available}
            if self._session.time not in available:
                raise ValidationError("Selected time is not available", missing=["time"])
        if self._index < len(self._steps) - 1:
            self._index += 1
        return self.current_step

    def previous(self) -> BookingStep:
        if self._index > 0:
            self._index -= 1
        return self.current_step

    def go_to(self, index: int) -> BookingStep:
        if 0 <= index < len(self._steps):
            self._index = index
        else:
            self._logger.warning(
                "Ignoring jump to invalid step",
                extra={"session_id": self._session_id, "reason": f"index={index}"},
            )
        return self.current_step

    def go_to_step(self, step: BookingStep) -> BookingStep:
        if step in self._steps:
            self._index = self._steps.index(step)
        return self.current_step

    def reset(self) -> None:
        self._session = BookingSession()
        self._steps = build_steps(None)
        self._index = 0
        self._slots = []
        self._fetch_seq += 1
        self._generation += 1
        self._creating = False
        self._confirmation = None
        self._last_error = None

    async def service_duration(self) -> int:
        session = self._session
        if session.link is None or not session.service_ids:
            return self._default_service_duration
        catalog = await self._catalog.get_services(session.link.company_id, session.branch_id)
        return total_duration(selected_services(session, catalog), self._default_service_duration)

    async def load_slots(self, day: date | None = None) -> list[Slot] | None:
        """
        Fetch slots for the chosen branch, staff and date.
        Returns None when a newer fetch was issued while this one was pending.
        """
        if day is not None and day != self._session.date:
            self.update({"date": day})

        session = self._session
        missing = [name for name in ("link", "branch_id", "staff", "date") if getattr(session, name) is None]
        if missing:
            raise ValidationError(f"Cannot load slots without: {', '.join(missing)}", missing=missing)

        self._fetch_seq += 1
        seq = self._fetch_seq

        try:
            duration = await self.service_duration()
            slots = await self._availability.get_slots(
                session.link.company_id,
                session.branch_id,
                session.staff,
                session.date,
                duration,
                granularity=session.link.settings.time_slot_interval,
            )
        except BookingError:
            if seq != self._fetch_seq:
                return None
            raise

        if seq != self._fetch_seq:
            self._logger.debug(
                "Discarding stale slots response",
                extra={"session_id": self._session_id, "reason": f"seq={seq} latest={self._fetch_seq}"},
            )
            return None

        self._slots = slots
        return list(slots)

    async def confirm(self) -> BookingConfirmation | None:
        """
        Create the appointment exactly once for this session.
        Returns None while a create is in flight. After success, repeated calls
        return the recorded confirmation with created=False.
        """
        if self._creating:
            self._logger.info("Confirm ignored, create in flight", extra={"session_id": self._session_id})
            return None
        if self._confirmation is not None:
            self._logger.info(
                "Confirm ignored, already created",
                extra={"session_id": self._session_id, "appointment_id": self._confirmation.appointment_id},
            )
            return dataclasses.replace(self._confirmation, created=False)

        require_complete(self._session, BookingStep.confirmation)

        # Set before the first await so a re-entrant trigger sees the flag.
        self._creating = True
        self._last_error = None
        generation = self._generation
        session = self._session

        try:
            catalog = await self._catalog.get_services(session.link.company_id, session.branch_id)
            snapshot = build_snapshot(
                session,
                selected_services(session, catalog),
                self._default_service_duration,
            )
            appointment_id = await self._appointments.create(snapshot)
        except BookingError as e:
            if generation == self._generation:
                self._last_error = e
            self._logger.warning(
                "Appointment creation failed",
                extra={"session_id": self._session_id, "error": str(e)},
            )
            raise
        finally:
            # A reset while the create was pending already cleared the flag for the new session.
            if generation == self._generation:
                self._creating = False

        confirmation = BookingConfirmation(appointment_id=appointment_id, snapshot=snapshot)
        if generation != self._generation:
            self._logger.info(
                "Appointment created for a reset session",
                extra={"session_id": self._session_id, "appointment_id": appointment_id},
            )
            return confirmation

        self._confirmation = confirmation
        self._logger.info(
            "Appointment created",
            extra={"session_id": self._session_id, "appointment_id": appointment_id},
        )
        return confirmation
