"""Availability orchestration: place config + booking snapshot + clock -> engine."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from booking_engine.domain.constraints import InvalidDate, InvalidReservation
from booking_engine.domain.models import (
    CalendarDay,
    DayAvailability,
    OperatingWindow,
    PlaceConfig,
    RangeCheckResult,
    Reservation,
)
from booking_engine.repository.data_repository import DataRepository
from booking_engine.services.clock import (
    BusinessClock,
    BusinessNow,
    Clock,
    filter_past_hours,
    is_past_date,
    is_past_hour,
)
from booking_engine.services.conflict_engine import reservations_on
from booking_engine.services.occupancy_service import booking_percentage, classify_hours
from booking_engine.services.slot_service import (
    fits_before_close,
    is_range_available,
    valid_end_times,
    valid_start_times,
)
from booking_engine.utils.config import Settings, get_settings
from booking_engine.utils.logger import get_logger
from booking_engine.utils.time_format import day_of_week, parse_date, parse_hour


logger = get_logger(__name__)


class AvailabilityError(Exception):
    """Base exception for availability workflow failures."""


class PlaceNotFoundError(AvailabilityError):
    """Raised when a place id does not exist in persisted state."""


REASON_AVAILABLE = "available"
REASON_CLOSED = "closed"
REASON_OUTSIDE_HOURS = "outside_hours"
REASON_TOO_SHORT = "too_short"
REASON_ENDS_TOO_LATE = "ends_too_late"
REASON_PAST = "past"
REASON_CONFLICT = "conflict"


def is_closed_on(place: PlaceConfig, target_date: date) -> bool:
    if target_date in place.blocked_dates:
        return True
    if day_of_week(target_date) in place.blocked_weekdays:
        return True
    if place.start_date is not None and target_date < place.start_date:
        return True
    if place.end_date is not None and target_date > place.end_date:
        return True
    return False


def resolve_operating_window(place: PlaceConfig, target_date: date) -> Optional[OperatingWindow]:
    """Weekday-specific hours first, then the place's default check-in/check-out.

    Returns ``None`` when the place does not open on ``target_date``.
    """
    if is_closed_on(place, target_date):
        return None
    weekday_hours = place.weekday_hours.get(day_of_week(target_date))
    if weekday_hours is not None:
        return OperatingWindow(
            start_hour=weekday_hours.start_hour,
            end_hour=weekday_hours.end_hour,
        )
    return OperatingWindow(start_hour=place.check_in_hour, end_hour=place.check_out_hour)


class AvailabilityService:
    """Answers calendar and time-picker queries for one place at a time."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._clock = clock or BusinessClock.from_settings(self._settings)

    def _load_place(self, place_id: int) -> PlaceConfig:
        place = self._repository.get_place_config(place_id)
        if place is None:
            raise PlaceNotFoundError(f"Place {place_id} was not found")
        return place

    def _bookable_start_times(
        self,
        place: PlaceConfig,
        target_date: date,
        window: OperatingWindow,
        reservations: Sequence[Reservation],
        now: BusinessNow,
    ) -> list[int]:
        start_times = valid_start_times(target_date, window, reservations, place.policy)
        return filter_past_hours(target_date, start_times, now)

    def get_day_availability(self, place_id: int, date_text: str) -> DayAvailability:
        target_date = parse_date(date_text)
        place = self._load_place(place_id)
        now = self._clock.now()
        window = resolve_operating_window(place, target_date)
        reservations = reservations_on(
            target_date,
            self._repository.get_reservations(place_id, target_date),
        )

        if window is None:
            logger.warning(
                "Day availability requested for closed date | place_id=%s | date=%s",
                place_id,
                target_date,
            )
            return DayAvailability(
                place_id=place_id,
                date=target_date,
                is_closed=True,
                window=None,
                start_times=[],
                booking_percentage=0,
                is_unbookable=True,
                slots=[],
                reservations=reservations,
            )

        start_times = self._bookable_start_times(place, target_date, window, reservations, now)
        percentage = booking_percentage(target_date, window, reservations, place.policy)
        slots = classify_hours(target_date, window, reservations, place.policy, now)

        logger.info(
            (
                "Day availability computed | place_id=%s | date=%s | window=%s-%s | "
                "reservations=%s | start_times=%s | percentage=%s"
            ),
            place_id,
            target_date,
            window.start_hour,
            window.end_hour,
            len(reservations),
            len(start_times),
            percentage,
        )
        return DayAvailability(
            place_id=place_id,
            date=target_date,
            is_closed=False,
            window=window,
            start_times=start_times,
            booking_percentage=percentage,
            is_unbookable=not start_times,
            slots=slots,
            reservations=reservations,
        )

    def get_start_times(self, place_id: int, date_text: str) -> list[int]:
        return self.get_day_availability(place_id, date_text).start_times

    def get_end_times(self, place_id: int, date_text: str, start_time: str) -> list[int]:
        target_date = parse_date(date_text)
        start_hour = parse_hour(start_time)
        place = self._load_place(place_id)
        window = resolve_operating_window(place, target_date)
        if window is None or is_past_hour(target_date, start_hour, self._clock.now()):
            return []
        reservations = self._repository.get_reservations(place_id, target_date)
        return valid_end_times(target_date, start_hour, window, reservations, place.policy)

    def check_range(
        self,
        place_id: int,
        date_text: str,
        start_time: str,
        end_time: str,
    ) -> RangeCheckResult:
        """Re-validate a concrete range right before a booking is confirmed."""
        target_date = parse_date(date_text)
        start_hour = parse_hour(start_time)
        end_hour = parse_hour(end_time)
        if end_hour <= start_hour:
            raise InvalidReservation(
                f"end time {end_time} must be after start time {start_time}"
            )

        place = self._load_place(place_id)
        policy = place.policy
        window = resolve_operating_window(place, target_date)

        if window is None:
            result = RangeCheckResult(available=False, reason=REASON_CLOSED)
        elif start_hour < window.start_hour or end_hour > window.end_hour:
            result = RangeCheckResult(available=False, reason=REASON_OUTSIDE_HOURS)
        elif end_hour - start_hour < policy.minimum_duration_hours:
            result = RangeCheckResult(available=False, reason=REASON_TOO_SHORT)
        elif not fits_before_close(start_hour, end_hour, window, policy.cooldown_hours):
            result = RangeCheckResult(available=False, reason=REASON_ENDS_TOO_LATE)
        elif is_past_hour(target_date, start_hour, self._clock.now()):
            result = RangeCheckResult(available=False, reason=REASON_PAST)
        elif not is_range_available(
            target_date,
            start_hour,
            end_hour,
            self._repository.get_reservations(place_id, target_date),
            policy.cooldown_hours,
        ):
            result = RangeCheckResult(available=False, reason=REASON_CONFLICT)
        else:
            result = RangeCheckResult(available=True, reason=REASON_AVAILABLE)

        logger.info(
            "Range checked | place_id=%s | date=%s | range=%s-%s | available=%s | reason=%s",
            place_id,
            target_date,
            start_hour,
            end_hour,
            result.available,
            result.reason,
        )
        return result

    def _parse_range(self, start_text: str, end_text: str, max_days: int) -> tuple[date, date]:
        start_date = parse_date(start_text)
        end_date = parse_date(end_text)
        if end_date < start_date:
            raise InvalidDate("end_date must not be before start_date")
        span = (end_date - start_date).days + 1
        if span > max_days:
            raise InvalidDate(f"date range spans {span} days; at most {max_days} are allowed")
        return start_date, end_date

    def get_calendar(self, place_id: int, start_text: str, end_text: str) -> list[CalendarDay]:
        """Per-date fullness and bookability for calendar cell colouring."""
        start_date, end_date = self._parse_range(
            start_text, end_text, self._settings.calendar_max_days
        )
        place = self._load_place(place_id)
        now = self._clock.now()
        reservations = self._repository.get_reservations_between(place_id, start_date, end_date)

        days: list[CalendarDay] = []
        current = start_date
        while current <= end_date:
            window = resolve_operating_window(place, current)
            past = is_past_date(current, now)
            if window is None:
                days.append(
                    CalendarDay(
                        date=current,
                        booking_percentage=0,
                        is_unbookable=True,
                        is_closed=True,
                        is_past=past,
                    )
                )
            else:
                start_times = self._bookable_start_times(place, current, window, reservations, now)
                days.append(
                    CalendarDay(
                        date=current,
                        booking_percentage=booking_percentage(
                            current, window, reservations, place.policy
                        ),
                        is_unbookable=not start_times,
                        is_closed=False,
                        is_past=past,
                    )
                )
            current += timedelta(days=1)

        logger.info(
            "Calendar computed | place_id=%s | start=%s | end=%s | days=%s | reservations=%s",
            place_id,
            start_date,
            end_date,
            len(days),
            len(reservations),
        )
        return days

    def list_open_dates(
        self,
        place_id: int,
        start_text: Optional[str] = None,
        end_text: Optional[str] = None,
    ) -> list[date]:
        """Non-past dates on which the place opens at all, up to the booking horizon."""
        requested_start = parse_date(start_text) if start_text else None
        requested_end = parse_date(end_text) if end_text else None
        if requested_start and requested_end and requested_end < requested_start:
            raise InvalidDate("end_date must not be before start_date")

        place = self._load_place(place_id)
        today = self._clock.now().date
        horizon = today + timedelta(days=self._settings.booking_horizon_days)
        start_date = max(requested_start or today, today)
        end_date = min(requested_end or horizon, horizon)
        if place.start_date is not None:
            start_date = max(start_date, place.start_date)
        if place.end_date is not None:
            end_date = min(end_date, place.end_date)

        open_dates: list[date] = []
        current = start_date
        while current <= end_date:
            if not is_closed_on(place, current):
                open_dates.append(current)
            current += timedelta(days=1)
        return open_dates
