from __future__ import annotations

from datetime import date

import pytest

from bookflow.application.exceptions import ParseError, ValidationError
from bookflow.application.use_cases.session import initial_session, merge_session
from bookflow.application.use_cases.snapshot import build_snapshot, missing_fields, total_duration
from bookflow.application.use_cases.steps import build_steps, reanchor
from bookflow.domain.entities.booking_link import BookingLink, BranchSettings
from bookflow.domain.entities.booking_session import BookingSession, RescheduleInfo
from bookflow.domain.entities.booking_step import BookingStep
from bookflow.domain.entities.service_catalog import Service
from bookflow.domain.entities.staff_selection import AnyStaff

LINK = BookingLink(id="l1", company_id="c1", slug="main")


def test_merge_returns_new_session():
    session = BookingSession()
    merged = merge_session(session, {"branch_id": "b1", "service_ids": ["a", "b"], "time": "09:30", "date": "2026-10-19"})
    assert session.branch_id is None
    assert merged.branch_id == "b1"
    assert merged.service_ids == ("a", "b")
    assert merged.time == 570
    assert merged.date == date(2026, 10, 19)


def test_merge_rejects_unknown_fields_and_bad_times():
    with pytest.raises(ValueError):
        merge_session(BookingSession(), {"colour": "red"})
    with pytest.raises(ParseError):
        merge_session(BookingSession(), {"time": "9h30"})


def test_merge_keeps_reschedule_unless_replaced():
    session = BookingSession(reschedule=RescheduleInfo("old"))
    assert merge_session(session, {"notes": "hi"}).reschedule == RescheduleInfo("old")
    assert merge_session(session, {"reschedule": None}).reschedule == RescheduleInfo("old")
    assert merge_session(session, {"reschedule": RescheduleInfo("new")}).reschedule == RescheduleInfo("new")


@pytest.mark.parametrize(
    "settings,expected_branch,skip",
    [
        (BranchSettings(mode="single", allowed_branches=("b1", "b2"), default_branch="b2"), "b2", False),
        (BranchSettings(mode="multi", allowed_branches=("b3",)), "b3", False),
        (BranchSettings(mode="multi", allowed_branches=("b1", "b2")), "b2", True),
        (BranchSettings(mode="single", allowed_branches=("b1", "b2")), None, False),
    ],
)
def test_initial_branch_resolution(settings, expected_branch, skip):
    link = BookingLink(id="l", company_id="c1", slug="x", branch_settings=settings)
    session, skip_branch_step = initial_session(link, branch_hint="b2")
    assert session.branch_id == expected_branch
    assert skip_branch_step is skip


def test_saved_branch_only_used_when_allowed():
    link = BookingLink(id="l", company_id="c1", slug="x", branch_settings=BranchSettings(mode="multi", allowed_branches=("b1", "b2")))
    assert initial_session(link, saved_branch_id="b1")[0].branch_id == "b1"
    assert initial_session(link, saved_branch_id="b7")[0].branch_id is None


def test_branch_step_only_for_multiple_branches():
    assert BookingStep.branch not in build_steps(None)
    assert BookingStep.branch not in build_steps(LINK)
    multi = BookingLink(id="l", company_id="c1", slug="x", branch_settings=BranchSettings(allowed_branches=("b1", "b2")))
    assert build_steps(multi)[0] == BookingStep.branch


def test_reanchor_by_identity():
    short = build_steps(None)
    long = (BookingStep.branch,) + short
    assert reanchor(short, short.index(BookingStep.datetime), long) == long.index(BookingStep.datetime)
    assert reanchor(long, 0, short) == 0
    assert reanchor(short, 42, long) == long.index(BookingStep.confirmation)


def test_missing_fields_per_step():
    session = BookingSession(link=LINK, branch_id="b1", date=date(2026, 10, 19))
    assert missing_fields(session, BookingStep.branch) == []
    assert missing_fields(session, BookingStep.datetime) == ["time"]
    assert missing_fields(session, BookingStep.confirmation) == [
        "service_ids",
        "staff",
        "time",
        "customer_name",
        "customer_phone",
    ]


def test_total_duration_defaults_to_half_hour():
    assert total_duration([]) == 30
    assert total_duration([Service("a", "A", 0)]) == 30
    assert total_duration([Service("a", "A", 45), Service("b", "B", 20)]) == 65


def test_snapshot_end_time_and_price():
    session = BookingSession(
        link=LINK,
        branch_id="b1",
        service_ids=("a",),
        staff=AnyStaff(),
        date=date(2026, 10, 19),
        time=23 * 60,
        customer_name=" Ana ",
        customer_phone="555",
    )
    snapshot = build_snapshot(session, [Service("a", "A", 90, 35.5), Service("b", "B", 30, 4.5)])
    assert snapshot.start_time == "23:00"
    assert snapshot.end_time == "25:00"
    assert snapshot.duration == 120
    assert snapshot.total_price == 40.0
    assert snapshot.client_name == "Ana"
    assert snapshot.staff_id is None


def test_snapshot_requires_complete_session():
    with pytest.raises(ValidationError):
        build_snapshot(BookingSession(link=LINK), [])
