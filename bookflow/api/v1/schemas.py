from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from bookflow.domain.entities.booking_step import BookingStep
from bookflow.domain.entities.slot import DayPeriod
from bookflow.domain.entities.staff_selection import AnyStaff, SpecificStaff, StaffSelection


class StaffMode(str, Enum):
    specific = "specific"
    any = "any"


class StaffSelectionSchema(BaseModel):
    mode: StaffMode
    staff_id: str | None = None

    @model_validator(mode="after")
    def _staff_id_for_specific(self) -> "StaffSelectionSchema":
        if self.mode == StaffMode.specific and not self.staff_id:
            raise ValueError("staff_id is required when mode is 'specific'")
        return self

    def to_domain(self) -> StaffSelection:
        if self.mode == StaffMode.any:
            return AnyStaff()
        return SpecificStaff(staff_id=self.staff_id)

    @classmethod
    def from_domain(cls, staff: StaffSelection | None) -> "StaffSelectionSchema | None":
        if staff is None:
            return None
        if isinstance(staff, SpecificStaff):
            return cls(mode=StaffMode.specific, staff_id=staff.staff_id)
        return cls(mode=StaffMode.any)


class RescheduleSchema(BaseModel):
    old_appointment_id: str
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    branch_id: str | None = None
    staff: StaffSelectionSchema | None = None
    service_ids: list[str] = Field(default_factory=list)


class StartSessionRequest(BaseModel):
    company_slug: str
    link_slug: str
    branch: str | None = None
    saved_branch_id: str | None = None
    reschedule: RescheduleSchema | None = None


class SessionPatchSchema(BaseModel):
    branch_id: str | None = None
    service_ids: list[str] | None = None
    staff: StaffSelectionSchema | None = None
    date: dt.date | None = None
    time: str | None = Field(default=None, pattern=r"^\d{1,2}:\d{2}$")
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None

    def to_patch(self) -> dict[str, Any]:
        patch: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name == "staff" and value is not None:
                value = value.to_domain()
            patch[name] = value
        return patch


class GoToRequest(BaseModel):
    index: int | None = None
    step: BookingStep | None = None


class SessionResponse(BaseModel):
    session_id: str
    steps: list[BookingStep]
    current_step: BookingStep
    current_index: int
    link_id: str | None = None
    branch_id: str | None = None
    service_ids: list[str] = Field(default_factory=list)
    staff: StaffSelectionSchema | None = None
    date: dt.date | None = None
    time: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None
    reschedule_of: str | None = None
    appointment_id: str | None = None
    is_creating: bool = False


class SlotSchema(BaseModel):
    time: str
    available: bool
    period: DayPeriod
    staff_id: str | None = None


class SlotsResponse(BaseModel):
    date: dt.date
    service_duration: int
    slots: list[SlotSchema]


class ConfirmResponse(BaseModel):
    appointment_id: str
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    total_price: float
    created: bool = True
