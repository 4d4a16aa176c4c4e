from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import date
from typing import Any

from bookflow.application.utils.time_math import parse_clock
from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.booking_session import BookingSession, RescheduleInfo, RescheduleSource

_FIELDS = frozenset(f.name for f in dataclasses.fields(BookingSession))


def merge_session(session: BookingSession, patch: Mapping[str, Any]) -> BookingSession:
    """
    Return a new session with patch applied.
    An existing reschedule marker survives unless the patch carries a new one.
    """
    unknown = set(patch) - _FIELDS
    if unknown:
        raise ValueError(f"Unknown booking session fields: {sorted(unknown)}")

    changes = dict(patch)
    if changes.get("reschedule") is None:
        changes.pop("reschedule", None)
    if "service_ids" in changes:
        changes["service_ids"] = tuple(changes["service_ids"] or ())
    if isinstance(changes.get("time"), str):
        changes["time"] = parse_clock(changes["time"])
    if isinstance(changes.get("date"), str):
        changes["date"] = date.fromisoformat(changes["date"])

    return dataclasses.replace(session, **changes)


def initial_session(
    link: BookingLink,
    branch_hint: str | None = None,
    saved_branch_id: str | None = None,
    reschedule: RescheduleSource | None = None,
) -> tuple[BookingSession, bool]:
    """
    Build the session a customer starts with when opening a booking link.
    Returns (session, skip_branch_step).
    """
    branches = link.branch_settings
    branch_id: str | None = None
    skip_branch_step = False

    if branches.mode == "single" and branches.default_branch:
        branch_id = branches.default_branch
    elif len(branches.allowed_branches) == 1:
        branch_id = branches.allowed_branches[0]
    elif branch_hint and branches.mode == "multi":
        if branch_hint in branches.allowed_branches:
            branch_id = branch_hint
            skip_branch_step = True
    elif saved_branch_id and saved_branch_id in branches.allowed_branches:
        branch_id = saved_branch_id

    patch: dict[str, Any] = {"link": link, "branch_id": branch_id}

    if reschedule is not None:
        patch.update(
            customer_name=reschedule.customer_name,
            customer_phone=reschedule.customer_phone,
            customer_email=reschedule.customer_email,
            branch_id=reschedule.branch_id or branch_id,
            staff=reschedule.staff,
            service_ids=reschedule.service_ids,
            reschedule=RescheduleInfo(old_appointment_id=reschedule.old_appointment_id),
        )

    return merge_session(BookingSession(), patch), skip_branch_step
