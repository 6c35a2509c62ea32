"""Occupied-interval model and the single conflict rule.

Every reservation and every candidate blocks ``[start, end + cooldown)``.
Two ranges conflict exactly when those cooldown-extended intervals overlap.
That one test covers direct overlap, landing inside an earlier booking's
cooldown, a candidate whose own cooldown runs into a later booking, and a
too-small gap between neighbours in either direction.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Union

from booking_engine.domain.models import CandidateRange, OccupiedInterval, Reservation


TimeRange = Union[CandidateRange, Reservation]


def occupied(time_range: TimeRange, cooldown_hours: float) -> OccupiedInterval:
    return OccupiedInterval(
        start=float(time_range.start_hour),
        end=float(time_range.end_hour) + cooldown_hours,
    )


def overlaps(first: OccupiedInterval, second: OccupiedInterval) -> bool:
    return first.start < second.end and second.start < first.end


def conflicts(
    candidate: TimeRange,
    reservation: TimeRange,
    cooldown_hours: float,
) -> bool:
    return overlaps(
        occupied(candidate, cooldown_hours),
        occupied(reservation, cooldown_hours),
    )


def has_conflict(
    candidate: TimeRange,
    reservations: Iterable[Reservation],
    cooldown_hours: float,
) -> bool:
    """Return True when any same-date reservation conflicts with the candidate."""
    return any(
        reservation.date == candidate.date
        and conflicts(candidate, reservation, cooldown_hours)
        for reservation in reservations
    )


def reservations_on(date_value: date, reservations: Iterable[Reservation]) -> list[Reservation]:
    return sorted(
        (reservation for reservation in reservations if reservation.date == date_value),
        key=lambda reservation: (reservation.start_hour, reservation.end_hour),
    )
