"""Tests for the cooldown-extended interval overlap rule."""

from __future__ import annotations

from datetime import date

from booking_engine.domain.models import CandidateRange, OccupiedInterval, Reservation
from booking_engine.services.conflict_engine import (
    conflicts,
    has_conflict,
    occupied,
    overlaps,
    reservations_on,
)


DAY = date(2026, 3, 2)


def _candidate(start: int, end: int, day: date = DAY) -> CandidateRange:
    return CandidateRange(date=day, start_hour=start, end_hour=end)


def _reservation(start: int, end: int, day: date = DAY) -> Reservation:
    return Reservation(date=day, start_hour=start, end_hour=end)


def test_occupied_interval_extends_end_by_cooldown() -> None:
    assert occupied(_reservation(10, 12), 0.5) == OccupiedInterval(start=10.0, end=12.5)


def test_overlaps_is_half_open() -> None:
    assert not overlaps(OccupiedInterval(9, 10), OccupiedInterval(10, 11))
    assert overlaps(OccupiedInterval(9, 10.5), OccupiedInterval(10, 11))


def test_direct_overlap_conflicts() -> None:
    assert conflicts(_candidate(11, 13), _reservation(10, 12), 0.0)


def test_candidate_inside_existing_cooldown_conflicts() -> None:
    assert conflicts(_candidate(12, 13), _reservation(10, 12), 0.5)


def test_forward_conflict_with_upcoming_booking() -> None:
    """Candidate [12,14) plus 1h cooldown runs into a booking at 14:00."""
    assert conflicts(_candidate(12, 14), _reservation(14, 15), 1.0)


def test_gap_shorter_than_cooldown_conflicts_in_both_directions() -> None:
    assert conflicts(_candidate(9, 10), _reservation(11, 12), 1.5)
    assert conflicts(_candidate(13, 14), _reservation(10, 12), 1.5)


def test_back_to_back_without_cooldown_does_not_conflict() -> None:
    assert not conflicts(_candidate(12, 13), _reservation(10, 12), 0.0)
    assert not conflicts(_candidate(9, 10), _reservation(10, 12), 0.0)


def test_gap_equal_to_cooldown_does_not_conflict() -> None:
    assert not conflicts(_candidate(13, 14), _reservation(10, 12), 1.0)
    assert not conflicts(_candidate(8, 9), _reservation(10, 12), 1.0)


def test_has_conflict_ignores_other_dates() -> None:
    other_day = date(2026, 3, 3)
    reservations = [_reservation(10, 12, day=other_day)]
    assert not has_conflict(_candidate(10, 12), reservations, 0.5)


def test_has_conflict_with_empty_snapshot() -> None:
    assert not has_conflict(_candidate(10, 12), [], 0.5)


def test_has_conflict_finds_any_matching_reservation() -> None:
    reservations = [_reservation(9, 10), _reservation(15, 16)]
    assert has_conflict(_candidate(14, 15), reservations, 0.5)
    assert not has_conflict(_candidate(11, 13), reservations, 0.5)


def test_reservations_on_filters_and_sorts() -> None:
    other_day = date(2026, 3, 3)
    reservations = [_reservation(14, 15), _reservation(9, 10, day=other_day), _reservation(10, 11)]
    assert reservations_on(DAY, reservations) == [_reservation(10, 11), _reservation(14, 15)]
