from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from bookflow.api.v1.schemas import (
    ConfirmResponse,
    GoToRequest,
    SessionPatchSchema,
    SessionResponse,
    SlotSchema,
    SlotsResponse,
    StaffSelectionSchema,
    StartSessionRequest,
)
from bookflow.application.exceptions import (
    BookingError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ParseError,
    ValidationError,
)
from bookflow.application.scheduling.slots import filter_slots
from bookflow.application.use_cases.booking_flow import BookingFlowController
from bookflow.application.use_cases.notify import NotifyBookingUseCase
from bookflow.application.utils.time_math import to_clock
from bookflow.domain.entities.booking_session import RescheduleSource
from bookflow.domain.entities.slot import DayPeriod
from bookflow.infrastructure.store.session_store import MemorySessionStore
from bookflow.wiring.dependencies import (
    Backends,
    create_booking_flow,
    get_backends,
    get_notify_use_case,
    get_session_store,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(e: BookingError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail={"message": str(e), "missing": e.missing})
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, NetworkError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def _get_flow(session_id: str, store: MemorySessionStore) -> BookingFlowController:
    flow = store.get(session_id)
    if flow is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return flow


def _session_response(session_id: str, flow: BookingFlowController) -> SessionResponse:
    session = flow.session
    return SessionResponse(
        session_id=session_id,
        steps=list(flow.steps),
        current_step=flow.current_step,
        current_index=flow.current_index,
        link_id=session.link.id if session.link else None,
        branch_id=session.branch_id,
        service_ids=list(session.service_ids),
        staff=StaffSelectionSchema.from_domain(session.staff),
        date=session.date,
        time=to_clock(session.time) if session.time is not None else None,
        customer_name=session.customer_name,
        customer_phone=session.customer_phone,
        customer_email=session.customer_email,
        notes=session.notes,
        reschedule_of=session.reschedule.old_appointment_id if session.reschedule else None,
        appointment_id=flow.appointment_id,
        is_creating=flow.is_creating,
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(
    req: StartSessionRequest,
    backends: Backends = Depends(get_backends),
    store: MemorySessionStore = Depends(get_session_store),
):
    try:
        link = await backends.links.get_link(req.company_slug, req.link_slug)
    except BookingError as e:
        raise _http_error(e)

    reschedule = None
    if req.reschedule is not None:
        reschedule = RescheduleSource(
            old_appointment_id=req.reschedule.old_appointment_id,
            customer_name=req.reschedule.customer_name,
            customer_phone=req.reschedule.customer_phone,
            customer_email=req.reschedule.customer_email,
            branch_id=req.reschedule.branch_id,
            staff=req.reschedule.staff.to_domain() if req.reschedule.staff else None,
            service_ids=tuple(req.reschedule.service_ids),
        )

    session_id = store.new_session_id()
    flow = create_booking_flow(session_id, backends)
    flow.start(link, branch_hint=req.branch, saved_branch_id=req.saved_branch_id, reschedule=reschedule)
    store.put(session_id, flow)
    return _session_response(session_id, flow)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, store: MemorySessionStore = Depends(get_session_store)):
    return _session_response(session_id, _get_flow(session_id, store))


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
def update_session(
    session_id: str,
    req: SessionPatchSchema,
    store: MemorySessionStore = Depends(get_session_store),
):
    flow = _get_flow(session_id, store)
    try:
        flow.update(req.to_patch())
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _session_response(session_id, flow)


@router.post("/sessions/{session_id}/next", response_model=SessionResponse)
def next_step(session_id: str, store: MemorySessionStore = Depends(get_session_store)):
    flow = _get_flow(session_id, store)
    try:
        flow.next()
    except ValidationError as e:
        raise _http_error(e)
    return _session_response(session_id, flow)


@router.post("/sessions/{session_id}/previous", response_model=SessionResponse)
def previous_step(session_id: str, store: MemorySessionStore = Depends(get_session_store)):
    flow = _get_flow(session_id, store)
    flow.previous()
    return _session_response(session_id, flow)


@router.post("/sessions/{session_id}/goto", response_model=SessionResponse)
def go_to_step(
    session_id: str,
    req: GoToRequest,
    store: MemorySessionStore = Depends(get_session_store),
):
    flow = _get_flow(session_id, store)
    if req.step is not None:
        flow.go_to_step(req.step)
    elif req.index is not None:
        flow.go_to(req.index)
    else:
        raise HTTPException(status_code=400, detail="Either step or index is required")
    return _session_response(session_id, flow)


@router.get("/sessions/{session_id}/slots", response_model=SlotsResponse)
async def list_slots(
    session_id: str,
    date: dt.date | None = None,
    period: list[DayPeriod] | None = Query(None),
    available_only: bool = False,
    store: MemorySessionStore = Depends(get_session_store),
):
    flow = _get_flow(session_id, store)
    try:
        slots = await flow.load_slots(date)
        duration = await flow.service_duration()
    except BookingError as e:
        raise _http_error(e)

    if slots is None:
        # A newer request for this session superseded this one.
        raise HTTPException(status_code=409, detail="Superseded by a newer availability request")

    if period is None and flow.session.link is not None:
        link_settings = flow.session.link.settings
        period = [
            p
            for p, shown in (
                (DayPeriod.morning, link_settings.show_morning_slots),
                (DayPeriod.afternoon, link_settings.show_afternoon_slots),
                (DayPeriod.evening, link_settings.show_evening_slots),
            )
            if shown
        ]

    return SlotsResponse(
        date=flow.session.date,
        service_duration=duration,
        slots=[
            SlotSchema(time=s.time, available=s.available, period=s.period, staff_id=s.staff_id)
            for s in filter_slots(slots, periods=period, available_only=available_only)
        ],
    )


@router.post("/sessions/{session_id}/confirm", response_model=ConfirmResponse)
async def confirm_session(
    session_id: str,
    background_tasks: BackgroundTasks,
    store: MemorySessionStore = Depends(get_session_store),
    notify: NotifyBookingUseCase = Depends(get_notify_use_case),
):
    flow = _get_flow(session_id, store)
    try:
        confirmation = await flow.confirm()
    except BookingError as e:
        raise _http_error(e)

    if confirmation is None:
        raise HTTPException(status_code=409, detail="Booking is already being created")

    if confirmation.created:
        background_tasks.add_task(notify.execute, confirmation.appointment_id, confirmation.snapshot)

    snapshot = confirmation.snapshot
    logger.info(
        "Booking confirmed",
        extra={"session_id": session_id, "appointment_id": confirmation.appointment_id},
    )
    return ConfirmResponse(
        appointment_id=confirmation.appointment_id,
        date=snapshot.date,
        start_time=snapshot.start_time,
        end_time=snapshot.end_time,
        duration=snapshot.duration,
        total_price=snapshot.total_price,
        created=confirmation.created,
    )


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, store: MemorySessionStore = Depends(get_session_store)):
    """Start over on the same booking link."""
    flow = _get_flow(session_id, store)
    link = flow.session.link
    if link is not None:
        flow.start(link)
    else:
        flow.reset()
    return _session_response(session_id, flow)


@router.delete("/sessions/{session_id}", status_code=204)
def finish_session(session_id: str, store: MemorySessionStore = Depends(get_session_store)):
    store.remove(session_id)
