from __future__ import annotations

from bookflow.domain.entities.booking_link import BookingLink
from bookflow.domain.entities.booking_step import BookingStep

BASE_STEPS = (
    BookingStep.service,
    BookingStep.staff,
    BookingStep.datetime,
    BookingStep.info,
    BookingStep.confirmation,
)


def build_steps(link: BookingLink | None) -> tuple[BookingStep, ...]:
    """Branch selection is shown only when the link offers more than one branch."""
    if link is not None and link.branch_settings.needs_branch_selection:
        return (BookingStep.branch,) + BASE_STEPS
    return BASE_STEPS


def reanchor(
    old_steps: tuple[BookingStep, ...],
    old_index: int,
    new_steps: tuple[BookingStep, ...],
) -> int:
    """Find the current step in a recomputed step list by identity rather than position."""
    if not old_steps:
        return 0
    old_index = min(max(old_index, 0), len(old_steps) - 1)
    for step in old_steps[old_index:]:
        if step in new_steps:
            return new_steps.index(step)
    return 0
