from __future__ import annotations

from datetime import date, datetime

import pytest

from booking_engine.domain.constraints import InvalidDate, InvalidPolicy, InvalidTimeFormat
from booking_engine.utils.time_format import (
    day_of_week,
    format_date,
    format_hour_12,
    format_hour_24,
    parse_date,
    parse_hour,
    to_cooldown_hours,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [("00:00", 0), ("09:00", 9), ("9:00", 9), ("23:00", 23), (" 14:00 ", 14)],
)
def test_parse_hour_accepts_whole_hours(text: str, expected: int) -> None:
    assert parse_hour(text) == expected


@pytest.mark.parametrize("text", ["09:30", "24:00", "9", "nine", "", "09:00:00", "-1:00"])
def test_parse_hour_rejects_malformed_values(text: str) -> None:
    with pytest.raises(InvalidTimeFormat):
        parse_hour(text)


def test_parse_hour_never_defaults_to_midnight() -> None:
    with pytest.raises(InvalidTimeFormat):
        parse_hour(None)  # type: ignore[arg-type]


def test_format_hour_24_pads() -> None:
    assert format_hour_24(9) == "09:00"
    assert format_hour_24(17) == "17:00"


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(0, "12:00 AM"), (9, "9:00 AM"), (12, "12:00 PM"), (13, "1:00 PM"), (23, "11:00 PM")],
)
def test_format_hour_12(hour: int, expected: str) -> None:
    assert format_hour_12(hour) == expected


def test_cooldown_minutes_convert_to_fractional_hours() -> None:
    assert to_cooldown_hours(0) == 0.0
    assert to_cooldown_hours(30) == 0.5
    assert to_cooldown_hours(90) == 1.5
    assert to_cooldown_hours(20) == pytest.approx(1 / 3)


def test_negative_cooldown_minutes_raise() -> None:
    with pytest.raises(InvalidPolicy):
        to_cooldown_hours(-15)


def test_parse_date_round_trip() -> None:
    parsed = parse_date("2026-03-02")
    assert parsed == date(2026, 3, 2)
    assert format_date(parsed) == "2026-03-02"


def test_parse_date_accepts_date_objects() -> None:
    assert parse_date(date(2026, 3, 2)) == date(2026, 3, 2)
    assert parse_date(datetime(2026, 3, 2, 15, 30)) == date(2026, 3, 2)


@pytest.mark.parametrize("text", ["2026/03/02", "2026-02-30", "tomorrow", ""])
def test_parse_date_rejects_invalid_strings(text: str) -> None:
    with pytest.raises(InvalidDate):
        parse_date(text)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(date(2026, 3, 8), 0), (date(2026, 3, 9), 1), (date(2026, 3, 7), 6)],
)
def test_day_of_week_counts_from_sunday(value: date, expected: int) -> None:
    assert day_of_week(value) == expected
