from __future__ import annotations

import pytest

from bookflow.application.scheduling.conflicts import busy_as_interval, is_occupied, occupying
from bookflow.application.scheduling.slots import compute_slots, filter_slots, group_by_period
from bookflow.application.utils.time_math import parse_clock
from bookflow.domain.entities.appointment import AppointmentStatus, BusyInterval
from bookflow.domain.entities.interval import Interval, TimeWindow
from bookflow.domain.entities.slot import DayPeriod, Slot
from bookflow.domain.entities.staff_selection import AnyStaff, SpecificStaff

STAFF = SpecificStaff("s1")


def _window(open_time: str, close_time: str) -> TimeWindow:
    return TimeWindow(parse_clock(open_time), parse_clock(close_time))


def _by_time(slots: list[Slot]) -> dict[str, bool]:
    return {s.time: s.available for s in slots}


def test_full_default_day_with_hour_long_service():
    slots = compute_slots(_window("09:00", "21:00"), 60, [], STAFF, 30)
    assert slots[0].time == "09:00"
    assert slots[-1].time == "20:00"
    assert len(slots) == 23
    assert all(s.available for s in slots)
    assert all(s.staff_id == "s1" for s in slots)


def test_staff_window_with_45_minute_service():
    slots = compute_slots(_window("12:00", "16:00"), 45, [], STAFF, 30)
    assert [s.time for s in slots] == ["12:00", "12:30", "13:00", "13:30", "14:00", "14:30", "15:00"]


def test_busy_interval_blocks_overlapping_slots():
    busy = [BusyInterval(start=parse_clock("14:00"), duration=45, status=AppointmentStatus.confirmed)]
    availability = _by_time(compute_slots(_window("13:00", "16:00"), 30, busy, STAFF, 30))
    assert availability["13:30"] is True
    assert availability["14:00"] is False
    assert availability["14:30"] is False
    assert availability["15:00"] is True


@pytest.mark.parametrize("granularity,duration", [(15, 30), (30, 45), (30, 60), (20, 50)])
def test_slots_stay_on_grid_and_inside_window(granularity, duration):
    window = _window("09:00", "18:00")
    busy = [
        BusyInterval(start=parse_clock("10:10"), duration=35, status=AppointmentStatus.pending),
        BusyInterval(start=parse_clock("15:00"), duration=None, status=AppointmentStatus.in_progress),
    ]
    slots = compute_slots(window, duration, busy, STAFF, granularity)

    assert [s.start for s in slots] == sorted(s.start for s in slots)
    for slot in slots:
        assert (slot.start - window.open) % granularity == 0
        assert slot.start + duration <= window.close
        blocked = is_occupied(Interval(slot.start, duration), busy)
        assert slot.available is not blocked


def test_only_active_statuses_occupy():
    busy = [
        BusyInterval(start=600, duration=60, status=status)
        for status in AppointmentStatus
    ]
    assert {b.status for b in occupying(busy)} == {
        AppointmentStatus.pending,
        AppointmentStatus.confirmed,
        AppointmentStatus.arrived,
        AppointmentStatus.in_progress,
    }
    cancelled = [BusyInterval(start=600, duration=60, status=AppointmentStatus.cancelled)]
    assert not is_occupied(Interval(600, 30), cancelled)


def test_missing_busy_duration_counts_as_an_hour():
    assert busy_as_interval(BusyInterval(start=600, duration=None)).end == 660
    assert busy_as_interval(BusyInterval(start=600, duration=0)).end == 660
    assert busy_as_interval(BusyInterval(start=600, duration=-30)).end == 660
    busy = [BusyInterval(start=600, duration=0, status=AppointmentStatus.confirmed)]
    assert is_occupied(Interval(630, 30), busy)
    assert not is_occupied(Interval(660, 30), busy)


def test_any_staff_ignores_bookings():
    busy = [BusyInterval(start=parse_clock("10:00"), duration=120, status=AppointmentStatus.confirmed)]
    slots = compute_slots(_window("09:00", "12:00"), 30, busy, AnyStaff(), 30)
    assert all(s.available for s in slots)
    assert all(s.staff_id is None for s in slots)


def test_empty_or_inverted_window_yields_nothing():
    assert compute_slots(TimeWindow(600, 600), 30, [], STAFF) == []
    assert compute_slots(TimeWindow(900, 600), 30, [], STAFF) == []
    assert compute_slots(_window("09:00", "09:20"), 30, [], STAFF) == []


def test_invalid_step_or_duration_rejected():
    with pytest.raises(ValueError):
        compute_slots(_window("09:00", "12:00"), 30, [], STAFF, 0)
    with pytest.raises(ValueError):
        compute_slots(_window("09:00", "12:00"), 0, [], STAFF)


def test_filter_and_group_by_period():
    busy = [BusyInterval(start=parse_clock("11:00"), duration=30, status=AppointmentStatus.confirmed)]
    slots = compute_slots(_window("10:00", "19:00"), 60, busy, STAFF, 60)

    grouped = group_by_period(slots)
    assert [s.time for s in grouped[DayPeriod.morning]] == ["10:00", "11:00"]
    assert [s.time for s in grouped[DayPeriod.afternoon]] == ["12:00", "13:00", "14:00", "15:00", "16:00"]
    assert [s.time for s in grouped[DayPeriod.evening]] == ["17:00", "18:00"]

    morning_open = filter_slots(slots, periods=[DayPeriod.morning], available_only=True)
    assert [s.time for s in morning_open] == ["10:00"]
    assert filter_slots(slots) == slots


def test_negative_busy_duration_does_not_break_slot_generation():
    busy = [BusyInterval(start=parse_clock("10:00"), duration=-30, status=AppointmentStatus.confirmed)]
    availability = _by_time(compute_slots(_window("09:00", "12:00"), 30, busy, STAFF, 30))
    assert availability["09:30"] is True
    assert availability["10:00"] is False
    assert availability["10:30"] is False
    assert availability["11:00"] is True
