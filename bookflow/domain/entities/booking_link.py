from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BranchSettings:
    mode: str = "single"  # "single" | "multi"
    allowed_branches: tuple[str, ...] = ()
    default_branch: str | None = None

    @property
    def needs_branch_selection(self) -> bool:
        return self.mode == "multi" or len(self.allowed_branches) > 1


@dataclass(frozen=True)
class LinkSettings:
    time_slot_interval: int | None = None
    allow_any_employee: bool = True
    show_morning_slots: bool = True
    show_afternoon_slots: bool = True
    show_evening_slots: bool = True


@dataclass(frozen=True)
class BookingLink:
    id: str
    company_id: str
    slug: str
    name: str = ""
    is_active: bool = True
    branch_settings: BranchSettings = field(default_factory=BranchSettings)
    settings: LinkSettings = field(default_factory=LinkSettings)
