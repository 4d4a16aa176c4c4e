from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SpecificStaff:
    staff_id: str


@dataclass(frozen=True)
class AnyStaff:
    """Any available specialist; assignment happens after the booking is created."""


StaffSelection = Union[SpecificStaff, AnyStaff]
