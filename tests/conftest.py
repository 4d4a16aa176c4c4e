from __future__ import annotations

from datetime import date

import pytest

# 2026-10-19 is a Monday, 2026-10-18 a Sunday.
MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 18)


def build_seed() -> dict:
    return {
        "links": [
            {
                "id": "link_main",
                "companySlug": "acme",
                "slug": "main",
                "companyId": "c1",
                "isActive": True,
                "branchSettings": {"mode": "single", "allowedBranches": ["b1"], "defaultBranch": "b1"},
                "settings": {"timeSlotInterval": 30},
            },
            {
                "id": "link_multi",
                "companySlug": "acme",
                "slug": "multi",
                "companyId": "c1",
                "isActive": True,
                "branchSettings": {"mode": "multi", "allowedBranches": ["b1", "b2"]},
                "settings": {},
            },
            {
                "id": "link_off",
                "companySlug": "acme",
                "slug": "old",
                "companyId": "c1",
                "isActive": False,
            },
        ],
        "branches": [
            {
                "id": "b1",
                "companyId": "c1",
                "operatingHours": {
                    "monday": {"isOpen": True, "openTime": "10:00", "closeTime": "18:00"},
                    "sunday": {"isOpen": False},
                },
            },
            {
                "id": "b2",
                "companyId": "c1",
                "operatingHours": {"monday": {"isOpen": True, "openTime": "08:00", "closeTime": "12:00"}},
            },
        ],
        "staff": [
            {
                "id": "s1",
                "name": "Dana",
                "schedule": {"workingHours": {"monday": {"enabled": True, "startTime": "12:00", "endTime": "16:00"}}},
            },
            {"id": "s2", "name": "Lee"},
            {
                "id": "s3",
                "name": "Sam",
                "schedule": {"workingHours": {"tuesday": {"enabled": True, "startTime": "09:00", "endTime": "13:00"}}},
            },
        ],
        "services": [
            {"id": "svc_cut", "companyId": "c1", "name": "Haircut", "duration": {"hours": 0, "minutes": 45}, "startingPrice": 20},
            {"id": "svc_beard", "companyId": "c1", "name": "Beard trim", "duration": {"hours": 0, "minutes": 15}, "startingPrice": 10},
            {"id": "svc_color", "companyId": "c1", "name": "Color", "branchIds": ["b2"], "duration": {"hours": 1, "minutes": 30}, "startingPrice": 60},
        ],
        "appointments": [
            {"id": "apt_old", "staffId": "s1", "date": "2026-10-19", "startTime": "13:00", "duration": 45, "status": "confirmed"},
            {"id": "apt_gone", "staffId": "s1", "date": "2026-10-19", "startTime": "14:00", "duration": 60, "status": "cancelled"},
            {"id": "apt_other_day", "staffId": "s1", "date": "2026-10-20", "startTime": "12:00", "duration": 60, "status": "pending"},
        ],
    }


@pytest.fixture
def seed() -> dict:
    return build_seed()
