"""Day-level fullness, unbookable-day detection and per-hour status labels."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from booking_engine.domain.models import (
    BookingPolicy,
    CandidateRange,
    HourSlot,
    OccupiedInterval,
    OperatingWindow,
    Reservation,
    SlotStatus,
)
from booking_engine.services.clock import BusinessNow, is_past_hour
from booking_engine.services.conflict_engine import (
    has_conflict,
    occupied,
    overlaps,
    reservations_on,
)
from booking_engine.services.slot_service import fits_before_close, valid_start_times
from booking_engine.utils.logger import get_logger


logger = get_logger(__name__)


def _round_half_up_percent(part: int, total: int) -> int:
    # Half-up: 37.5 -> 38, 12.5 -> 13.
    return (part * 200 + total) // (2 * total)


def occupied_hours(
    booking_date: date,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
) -> list[int]:
    """Hours of the window counted as taken for calendar fullness.

    An hour is taken when a minimum-length booking starting there would
    overlap an existing reservation's occupied interval. Hours that are only
    unusable because the day closes too soon are not counted.
    """
    intervals = [
        occupied(reservation, policy.cooldown_hours)
        for reservation in reservations_on(booking_date, reservations)
    ]
    if not intervals:
        return []

    taken: list[int] = []
    for hour in window.hours():
        probe = OccupiedInterval(
            start=float(hour),
            end=float(hour + policy.minimum_duration_hours),
        )
        if any(overlaps(probe, interval) for interval in intervals):
            taken.append(hour)
    return taken


def booking_percentage(
    booking_date: date,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
) -> int:
    taken = occupied_hours(booking_date, window, reservations, policy)
    percentage = _round_half_up_percent(len(taken), window.total_hours)
    logger.debug(
        "Booking percentage computed | date=%s | occupied_hours=%s | total_hours=%s | percentage=%s",
        booking_date,
        len(taken),
        window.total_hours,
        percentage,
    )
    return percentage


def is_date_completely_unbookable(
    booking_date: date,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
) -> bool:
    return not valid_start_times(booking_date, window, reservations, policy)


def classify_hour(
    booking_date: date,
    hour: int,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
    now: Optional[BusinessNow] = None,
) -> SlotStatus:
    """Assign exactly one status using BOOKED > COOLDOWN > CONFLICTED > PAST > DAY_END."""
    cooldown_hours = policy.cooldown_hours
    same_day = reservations_on(booking_date, reservations)

    if any(reservation.start_hour <= hour < reservation.end_hour for reservation in same_day):
        return SlotStatus.BOOKED
    if any(
        reservation.end_hour <= hour < reservation.end_hour + cooldown_hours
        for reservation in same_day
    ):
        return SlotStatus.COOLDOWN

    minimum_end = hour + policy.minimum_duration_hours
    if hour < window.end_hour and has_conflict(
        CandidateRange(date=booking_date, start_hour=hour, end_hour=minimum_end),
        same_day,
        cooldown_hours,
    ):
        return SlotStatus.CONFLICTED
    if now is not None and is_past_hour(booking_date, hour, now):
        return SlotStatus.PAST
    if hour >= window.end_hour or not fits_before_close(
        hour, minimum_end, window, cooldown_hours
    ):
        return SlotStatus.DAY_END
    return SlotStatus.AVAILABLE


def classify_hours(
    booking_date: date,
    window: OperatingWindow,
    reservations: Sequence[Reservation],
    policy: BookingPolicy,
    now: Optional[BusinessNow] = None,
) -> list[HourSlot]:
    """Label every hour of ``[start_hour, end_hour]``; the closing hour is DAY_END or busier."""
    return [
        HourSlot(
            hour=hour,
            status=classify_hour(booking_date, hour, window, reservations, policy, now),
        )
        for hour in range(window.start_hour, window.end_hour + 1)
    ]
