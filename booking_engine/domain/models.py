"""Domain models for hourly room availability."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from booking_engine.domain.constraints import (
    validate_policy,
    validate_range_hours,
    validate_window,
)
from booking_engine.utils.time_format import to_cooldown_hours


@dataclass(frozen=True)
class OperatingWindow:
    """Half-open ``[start_hour, end_hour)`` range a room is open on a date."""

    start_hour: int
    end_hour: int

    def __post_init__(self) -> None:
        validate_window(self.start_hour, self.end_hour)

    @property
    def total_hours(self) -> int:
        return self.end_hour - self.start_hour

    def hours(self) -> range:
        return range(self.start_hour, self.end_hour)


@dataclass(frozen=True)
class BookingPolicy:
    minimum_duration_hours: int
    cooldown_minutes: int

    def __post_init__(self) -> None:
        validate_policy(self.minimum_duration_hours, self.cooldown_minutes)

    @property
    def cooldown_hours(self) -> float:
        return to_cooldown_hours(self.cooldown_minutes)


@dataclass(frozen=True)
class Reservation:
    """A committed booking read from the booking store."""

    date: date
    start_hour: int
    end_hour: int
    reservation_id: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        validate_range_hours(self.start_hour, self.end_hour)


@dataclass(frozen=True)
class CandidateRange:
    """A proposed, not-yet-committed reservation under evaluation."""

    date: date
    start_hour: int
    end_hour: int

    def __post_init__(self) -> None:
        validate_range_hours(self.start_hour, self.end_hour)


@dataclass(frozen=True)
class OccupiedInterval:
    """``[start, end)`` span a range blocks, cooldown included."""

    start: float
    end: float


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    COOLDOWN = "cooldown"
    CONFLICTED = "conflicted"
    DAY_END = "day_end"
    PAST = "past"


@dataclass(frozen=True)
class HourSlot:
    hour: int
    status: SlotStatus


@dataclass(frozen=True)
class WeekdayHours:
    start_hour: int
    end_hour: int


@dataclass(frozen=True)
class PlaceConfig:
    """Read-only booking configuration of one bookable room.

    ``weekday_hours`` and ``blocked_weekdays`` use 0 = Sunday ... 6 = Saturday
    (see ``day_of_week``). Weekdays without an entry fall back to
    ``check_in_hour``/``check_out_hour``.
    """

    place_id: int
    title: str
    check_in_hour: int
    check_out_hour: int
    minimum_duration_hours: int
    cooldown_minutes: int
    weekday_hours: dict[int, WeekdayHours] = field(default_factory=dict)
    blocked_dates: frozenset[date] = frozenset()
    blocked_weekdays: frozenset[int] = frozenset()
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def policy(self) -> BookingPolicy:
        return BookingPolicy(
            minimum_duration_hours=self.minimum_duration_hours,
            cooldown_minutes=self.cooldown_minutes,
        )


@dataclass(frozen=True)
class DayAvailability:
    place_id: int
    date: date
    is_closed: bool
    window: Optional[OperatingWindow]
    start_times: list[int]
    booking_percentage: int
    is_unbookable: bool
    slots: list[HourSlot]
    reservations: list[Reservation]


@dataclass(frozen=True)
class RangeCheckResult:
    available: bool
    reason: str


@dataclass(frozen=True)
class CalendarDay:
    date: date
    booking_percentage: int
    is_unbookable: bool
    is_closed: bool
    is_past: bool
