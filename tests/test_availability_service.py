from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from booking_engine.domain.constraints import InvalidDate, InvalidReservation, InvalidTimeFormat
from booking_engine.domain.models import SlotStatus
from booking_engine.repository.data_repository import DataRepository
from booking_engine.services.availability_service import (
    REASON_AVAILABLE,
    REASON_CLOSED,
    REASON_CONFLICT,
    REASON_ENDS_TOO_LATE,
    REASON_OUTSIDE_HOURS,
    REASON_PAST,
    REASON_TOO_SHORT,
    AvailabilityService,
    PlaceNotFoundError,
)
from booking_engine.services.clock import BusinessNow, FrozenClock
from booking_engine.utils.config import get_settings


# 2026-03-02 is a Monday.
TODAY = date(2026, 3, 2)
NOW = BusinessNow(date=TODAY, hour=13, minute=5)


def _build_test_settings(tmp_path, filename: str):
    get_settings.cache_clear()
    base = get_settings()
    return replace(base, database_path=tmp_path / filename)


def _build_service(tmp_path) -> tuple[AvailabilityService, DataRepository, int]:
    settings = _build_test_settings(tmp_path, "availability.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    place_id = repository.create_place(
        title="Studio A",
        check_in="09:00",
        check_out="17:00",
        minimum_hours=1,
        cooldown_minutes=30,
        weekday_time_slots={6: ("10:00", "15:00")},
        blocked_weekdays=[0],
        blocked_dates=["2026-03-10"],
    )
    repository.add_reservation(
        place_id=place_id, date="2026-03-03", start_time="10:00", end_time="12:00"
    )
    repository.add_reservation(
        place_id=place_id,
        date="2026-03-03",
        start_time="13:00",
        end_time="15:00",
        status="pending",
    )
    service = AvailabilityService(
        repository=repository,
        settings=settings,
        clock=FrozenClock(NOW),
    )
    return service, repository, place_id


def test_day_availability_uses_default_hours_and_approved_bookings(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    day = service.get_day_availability(place_id, "2026-03-03")

    assert not day.is_closed
    assert (day.window.start_hour, day.window.end_hour) == (9, 17)
    assert day.start_times == [13, 14, 15]
    assert day.booking_percentage == 38
    assert not day.is_unbookable
    assert [(r.start_hour, r.end_hour) for r in day.reservations] == [(10, 12)]
    assert day.slots[0].status is SlotStatus.CONFLICTED
    assert day.slots[-1].status is SlotStatus.DAY_END


def test_weekday_hours_override_default_window(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    saturday = service.get_day_availability(place_id, "2026-03-07")

    assert (saturday.window.start_hour, saturday.window.end_hour) == (10, 15)
    assert saturday.start_times == [10, 11, 12, 13]


@pytest.mark.parametrize("closed_date", ["2026-03-08", "2026-03-10"])
def test_blocked_weekdays_and_dates_are_closed(tmp_path, closed_date):
    service, _, place_id = _build_service(tmp_path)

    day = service.get_day_availability(place_id, closed_date)

    assert day.is_closed
    assert day.window is None
    assert day.start_times == []
    assert day.booking_percentage == 0
    assert day.is_unbookable


def test_listing_date_range_closes_outside_days(tmp_path):
    service, repository, _ = _build_service(tmp_path)
    place_id = repository.create_place(
        title="Pop-up room",
        start_date="2026-03-05",
        end_date="2026-03-20",
    )

    assert service.get_day_availability(place_id, "2026-03-04").is_closed
    assert not service.get_day_availability(place_id, "2026-03-05").is_closed
    assert service.get_day_availability(place_id, "2026-03-21").is_closed


def test_missing_place_policy_falls_back_to_settings(tmp_path):
    service, repository, _ = _build_service(tmp_path)
    place_id = repository.create_place(title="Bare room")

    day = service.get_day_availability(place_id, "2026-03-04")

    assert (day.window.start_hour, day.window.end_hour) == (9, 17)
    assert day.start_times == list(range(9, 16))


def test_today_hides_elapsed_start_times(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    day = service.get_day_availability(place_id, "2026-03-02")
    statuses = {slot.hour: slot.status for slot in day.slots}

    assert day.start_times == [14, 15]
    assert statuses[13] is SlotStatus.PAST
    assert statuses[14] is SlotStatus.AVAILABLE
    assert service.get_start_times(place_id, "2026-03-02") == [14, 15]


def test_end_times_follow_start_selection(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    assert service.get_end_times(place_id, "2026-03-03", "13:00") == [14, 15, 16]
    assert service.get_end_times(place_id, "2026-03-03", "12:00") == []
    assert service.get_end_times(place_id, "2026-03-08", "10:00") == []
    assert service.get_end_times(place_id, "2026-03-02", "13:00") == []


@pytest.mark.parametrize(
    ("booking_date", "start", "end", "reason"),
    [
        ("2026-03-08", "10:00", "12:00", REASON_CLOSED),
        ("2026-03-03", "08:00", "10:00", REASON_OUTSIDE_HOURS),
        ("2026-03-07", "14:00", "16:00", REASON_OUTSIDE_HOURS),
        ("2026-03-03", "15:00", "17:00", REASON_ENDS_TOO_LATE),
        ("2026-03-02", "12:00", "13:00", REASON_PAST),
        ("2026-03-03", "12:00", "13:00", REASON_CONFLICT),
        ("2026-03-03", "09:00", "10:00", REASON_CONFLICT),
        ("2026-03-03", "13:00", "15:00", REASON_AVAILABLE),
    ],
)
def test_check_range_reports_first_failing_rule(tmp_path, booking_date, start, end, reason):
    service, _, place_id = _build_service(tmp_path)

    result = service.check_range(place_id, booking_date, start, end)

    assert result.reason == reason
    assert result.available is (reason == REASON_AVAILABLE)


def test_check_range_enforces_minimum_duration(tmp_path):
    service, repository, _ = _build_service(tmp_path)
    place_id = repository.create_place(title="Long sessions", minimum_hours=3, cooldown_minutes=0)

    assert service.check_range(place_id, "2026-03-04", "10:00", "12:00").reason == REASON_TOO_SHORT
    assert service.check_range(place_id, "2026-03-04", "10:00", "13:00").available


def test_check_range_rejects_inverted_range(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    with pytest.raises(InvalidReservation):
        service.check_range(place_id, "2026-03-03", "14:00", "14:00")
    with pytest.raises(InvalidTimeFormat):
        service.check_range(place_id, "2026-03-03", "14:30", "16:00")


def test_calendar_reports_each_day(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    days = {day.date: day for day in service.get_calendar(place_id, "2026-02-27", "2026-03-08")}

    assert len(days) == 10
    assert days[date(2026, 2, 27)].is_past
    assert days[date(2026, 2, 27)].is_unbookable
    assert not days[TODAY].is_past
    assert not days[TODAY].is_unbookable
    assert days[date(2026, 3, 3)].booking_percentage == 38
    assert days[date(2026, 3, 4)].booking_percentage == 0
    assert days[date(2026, 3, 8)].is_closed
    assert days[date(2026, 3, 8)].is_unbookable


def test_calendar_rejects_bad_ranges(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    with pytest.raises(InvalidDate):
        service.get_calendar(place_id, "2026-03-10", "2026-03-01")
    with pytest.raises(InvalidDate):
        service.get_calendar(place_id, "2026-03-01", "2026-09-01")


def test_unknown_place_raises(tmp_path):
    service, _, _ = _build_service(tmp_path)

    with pytest.raises(PlaceNotFoundError):
        service.get_day_availability(999, "2026-03-03")


def test_open_dates_skip_closed_and_elapsed_days(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    open_dates = service.list_open_dates(place_id, "2026-02-20", "2026-03-10")

    assert open_dates == [
        date(2026, 3, 2),
        date(2026, 3, 3),
        date(2026, 3, 4),
        date(2026, 3, 5),
        date(2026, 3, 6),
        date(2026, 3, 7),
        date(2026, 3, 9),
    ]


def test_open_dates_stop_at_booking_horizon(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    open_dates = service.list_open_dates(place_id)

    assert open_dates[0] == TODAY
    assert (open_dates[-1] - TODAY).days <= get_settings().booking_horizon_days


def test_weekday_numbers_start_on_sunday(tmp_path):
    service, repository, _ = _build_service(tmp_path)
    place_id = repository.create_place(
        title="Weekend studio",
        weekday_time_slots={0: ("10:00", "15:00")},
        blocked_weekdays=[6],
    )

    sunday = service.get_day_availability(place_id, "2026-03-08")
    saturday = service.get_day_availability(place_id, "2026-03-07")

    assert (sunday.window.start_hour, sunday.window.end_hour) == (10, 15)
    assert saturday.is_closed


def test_open_dates_reject_inverted_range_like_calendar(tmp_path):
    service, _, place_id = _build_service(tmp_path)

    with pytest.raises(InvalidDate):
        service.list_open_dates(place_id, "2026-03-10", "2026-03-05")
    with pytest.raises(InvalidDate):
        service.get_calendar(place_id, "2026-03-10", "2026-03-05")
