from __future__ import annotations

import asyncio
import json
from datetime import datetime

import pytest

from bookflow.application.exceptions import ConflictError, NotFoundError, ValidationError
from bookflow.domain.entities.appointment import AppointmentServiceLine, AppointmentSnapshot
from bookflow.infrastructure.store.memory_store import (
    MemoryAppointmentRepository,
    MemoryBookingLinks,
    MemoryDirectory,
    MemoryServiceCatalog,
)
from bookflow.infrastructure.store.session_store import MemorySessionStore
from tests.conftest import MONDAY


def _snapshot(start: str, end: str, duration: int, staff_id: str | None = "s1", **kwargs) -> AppointmentSnapshot:
    return AppointmentSnapshot(
        company_id="c1",
        branch_id="b1",
        staff_id=staff_id,
        client_name=kwargs.pop("client_name", "Ana"),
        client_phone="+15550100",
        client_email="",
        services=(AppointmentServiceLine("svc_cut", "Haircut", duration, 20.0),),
        date=MONDAY,
        start_time=start,
        end_time=end,
        duration=duration,
        total_price=20.0,
        **kwargs,
    )


def _seed_ids(seed: dict) -> set[str]:
    return {doc["id"] for doc in seed["appointments"]}


def test_create_rejects_overlap_with_active_booking(seed):
    repository = MemoryAppointmentRepository(MemoryDirectory.from_dict(seed))
    with pytest.raises(ConflictError):
        asyncio.run(repository.create(_snapshot("13:30", "14:00", 30)))

    # The cancelled 14:00 booking frees its slot.
    appointment_id = asyncio.run(repository.create(_snapshot("14:00", "14:45", 45)))
    assert appointment_id not in _seed_ids(seed)


def test_any_staff_booking_skips_conflict_check(seed):
    repository = MemoryAppointmentRepository(MemoryDirectory.from_dict(seed))
    assert asyncio.run(repository.create(_snapshot("13:00", "13:45", 45, staff_id=None)))


def test_reschedule_replaces_the_old_booking(seed):
    directory = MemoryDirectory.from_dict(seed)
    repository = MemoryAppointmentRepository(directory)

    appointment_id = asyncio.run(repository.create(_snapshot("13:15", "14:00", 45, reschedule_of="apt_old")))

    assert directory.appointments["apt_old"]["status"] == "rescheduled"
    assert directory.appointments[appointment_id]["rescheduleOf"] == "apt_old"
    busy = asyncio.run(repository.list_busy("s1", datetime(2026, 10, 19), datetime(2026, 10, 19, 23, 59)))
    assert sorted((b.start, b.status.value) for b in busy) == [
        (780, "rescheduled"),
        (795, "pending"),
        (840, "cancelled"),
    ]


def test_create_requires_contact_details(seed):
    repository = MemoryAppointmentRepository(MemoryDirectory.from_dict(seed))
    with pytest.raises(ValidationError):
        asyncio.run(repository.create(_snapshot("10:00", "10:30", 30, client_name="")))


def test_list_busy_is_limited_to_the_range(seed):
    repository = MemoryAppointmentRepository(MemoryDirectory.from_dict(seed))
    busy = asyncio.run(repository.list_busy("s1", datetime(2026, 10, 20), datetime(2026, 10, 20, 23, 59)))
    assert [(b.start, b.duration) for b in busy] == [(720, 60)]
    assert asyncio.run(repository.list_busy("s2", datetime(2026, 10, 19), datetime(2026, 10, 19, 23, 59))) == []


def test_services_filtered_by_branch(seed):
    catalog = MemoryServiceCatalog(MemoryDirectory.from_dict(seed))
    assert [s.id for s in asyncio.run(catalog.get_services("c1", "b1"))] == ["svc_cut", "svc_beard"]
    assert [s.id for s in asyncio.run(catalog.get_services("c1", "b2"))] == ["svc_cut", "svc_beard", "svc_color"]
    assert asyncio.run(catalog.get_services("other", "b1")) == []


def test_links_from_seed_file(tmp_path, seed):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed), encoding="utf-8")
    links = MemoryBookingLinks(MemoryDirectory.from_seed(path))

    link = asyncio.run(links.get_link("acme", "main"))
    assert link.id == "link_main"
    assert link.branch_settings.default_branch == "b1"
    with pytest.raises(NotFoundError):
        asyncio.run(links.get_link("acme", "old"))
    with pytest.raises(NotFoundError):
        asyncio.run(links.get_link("acme", "nope"))


def test_session_store_evicts_oldest():
    store = MemorySessionStore(limit=2)
    store.put("a", 1)
    store.put("b", 2)
    store.put("c", 3)
    assert store.get("a") is None
    assert store.get("c") == 3
    store.remove("c")
    store.remove("c")
    assert store.get("c") is None
    assert store.new_session_id() != store.new_session_id()


def test_created_ids_never_overwrite_seeded_bookings(seed):
    seed["appointments"].append(
        {"id": "apt_4", "staffId": "s2", "date": "2026-10-19", "startTime": "09:00", "duration": 30, "status": "confirmed"}
    )
    directory = MemoryDirectory.from_dict(seed)
    repository = MemoryAppointmentRepository(directory)

    first = asyncio.run(repository.create(_snapshot("10:00", "10:30", 30)))
    second = asyncio.run(repository.create(_snapshot("10:30", "11:00", 30)))

    assert first != second
    assert {first, second}.isdisjoint(_seed_ids(seed))
    assert directory.appointments["apt_4"]["staffId"] == "s2"
    assert len(directory.appointments) == len(seed["appointments"]) + 2
