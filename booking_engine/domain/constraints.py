"""Domain-level validation rules for availability inputs."""

from __future__ import annotations


class AvailabilityInputError(ValueError):
    """Base class for caller configuration/input errors."""


class InvalidTimeFormat(AvailabilityInputError):
    """Raised when a time string is not a whole-hour ``HH:00`` value."""


class InvalidPolicy(AvailabilityInputError):
    """Raised when a booking policy violates its bounds."""


class InvalidWindow(AvailabilityInputError):
    """Raised when an operating window is empty or out of the day."""


class InvalidDate(AvailabilityInputError):
    """Raised when a calendar date string cannot be parsed."""


class InvalidReservation(AvailabilityInputError):
    """Raised when a reservation or candidate range ends before it starts."""


HOURS_PER_DAY = 24


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_window(start_hour: int, end_hour: int) -> None:
    if not _is_int(start_hour) or not _is_int(end_hour):
        raise InvalidWindow("operating window hours must be integers")
    if not 0 <= start_hour < HOURS_PER_DAY:
        raise InvalidWindow(f"window start hour {start_hour} is outside 0-23")
    if not 0 < end_hour <= HOURS_PER_DAY:
        raise InvalidWindow(f"window end hour {end_hour} is outside 1-24")
    if end_hour <= start_hour:
        raise InvalidWindow(
            f"window end hour {end_hour} must be after start hour {start_hour}"
        )


def validate_policy(minimum_duration_hours: int, cooldown_minutes: int) -> None:
    if not _is_int(minimum_duration_hours) or minimum_duration_hours < 1:
        raise InvalidPolicy("minimum_duration_hours must be an integer >= 1")
    if not _is_int(cooldown_minutes) or cooldown_minutes < 0:
        raise InvalidPolicy("cooldown_minutes must be an integer >= 0")


def validate_range_hours(start_hour: float, end_hour: float) -> None:
    if end_hour <= start_hour:
        raise InvalidReservation(
            f"end hour {end_hour} must be after start hour {start_hour}"
        )
