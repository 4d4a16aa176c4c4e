from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Interval:
    """Half-open range of minutes since midnight: [start, start + duration)."""

    start: int
    duration: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Interval start must be >= 0, got {self.start}")
        if self.duration <= 0:
            raise ValueError(f"Interval duration must be > 0, got {self.duration}")

    @property
    def end(self) -> int:
        return self.start + self.duration


@dataclass(frozen=True)
class TimeWindow:
    open: int
    close: int

    @property
    def is_empty(self) -> bool:
        return self.close <= self.open
