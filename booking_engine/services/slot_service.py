"""Start/end hour enumeration for the booking time pickers."""

from __future__ import annotations

from datetime import date
from typing import Sequence

from booking_engine.domain.models import (
    BookingPolicy,
    CandidateRange,
    OperatingWindow,
    Reservation,
)
from booking_engine.services.conflict_engine import has_conflict
from booking_engine.utils.logger import get_logger


logger = get_logger(__name__)


def fits_before_close(
    start_hour: int,
    end_hour: int,
    window: OperatingWindow,
    cooldown_hours: float,
) -> bool:
    """True when ``[start, end)`` plus its own cooldown ends by closing time."""
    return end_hour + cooldown_hours <= window.end_hour


def valid_start_times(
    booking_date: date,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
) -> list[int]:
    cooldown_hours = policy.cooldown_hours
    minimum = policy.minimum_duration_hours
    start_times: list[int] = []
    for hour in window.hours():
        minimum_end = hour + minimum
        if not fits_before_close(hour, minimum_end, window, cooldown_hours):
            continue
        candidate = CandidateRange(date=booking_date, start_hour=hour, end_hour=minimum_end)
        if has_conflict(candidate, reservations, cooldown_hours):
            continue
        start_times.append(hour)

    logger.debug(
        "Start times enumerated | date=%s | window=%s-%s | start_times=%s",
        booking_date,
        window.start_hour,
        window.end_hour,
        start_times,
    )
    return start_times


def valid_end_times(
    booking_date: date,
    start_hour: int,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
) -> list[int]:
    """List selectable end hours for ``start_hour`` in ascending order.

    The first candidate is ``start_hour + minimum_duration_hours`` so a valid
    start always yields at least that end hour.
    """
    if not window.start_hour <= start_hour < window.end_hour:
        return []

    cooldown_hours = policy.cooldown_hours
    minimum = policy.minimum_duration_hours
    end_times: list[int] = []
    for end_hour in range(start_hour + minimum, window.end_hour + 1):
        if not fits_before_close(start_hour, end_hour, window, cooldown_hours):
            continue
        if not is_range_available(
            booking_date, start_hour, end_hour, reservations, cooldown_hours
        ):
            continue
        end_times.append(end_hour)
    return end_times


def is_range_available(
    booking_date: date,
    start_hour: int,
    end_hour: int,
    reservations: Sequence[Reservation],
    cooldown_hours: float,
) -> bool:
    if end_hour <= start_hour:
        return False
    candidate = CandidateRange(date=booking_date, start_hour=start_hour, end_hour=end_hour)
    return not has_conflict(candidate, reservations, cooldown_hours)
