"""Business-timezone clock and the elapsed-hour filter.

"Now" always comes from an injected clock pinned to the business UTC offset,
never from the host machine's local time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Optional, Protocol

from booking_engine.utils.config import Settings, get_settings


@dataclass(frozen=True)
class BusinessNow:
    date: date
    hour: int
    minute: int


class Clock(Protocol):
    def now(self) -> BusinessNow:
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BusinessClock:
    """Fixed-offset clock; no daylight-saving transitions are modelled."""

    def __init__(
        self,
        utc_offset_hours: int,
        name: Optional[str] = None,
        now_fn: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._tz = timezone(timedelta(hours=utc_offset_hours), name)
        self._now_fn = now_fn

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BusinessClock":
        settings = settings or get_settings()
        return cls(
            utc_offset_hours=settings.business_utc_offset_hours,
            name=settings.business_timezone_name,
        )

    def now(self) -> BusinessNow:
        current = self._now_fn()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        local = current.astimezone(self._tz)
        return BusinessNow(date=local.date(), hour=local.hour, minute=local.minute)


class FrozenClock:
    def __init__(self, now: BusinessNow) -> None:
        self._now = now

    def now(self) -> BusinessNow:
        return self._now


def is_past_hour(target_date: date, hour: int, now: BusinessNow) -> bool:
    # The current hour counts as elapsed even at minute 0.
    if target_date > now.date:
        return False
    if target_date < now.date:
        return True
    return hour <= now.hour


def is_past_date(target_date: date, now: BusinessNow) -> bool:
    return target_date < now.date


def filter_past_hours(
    target_date: date,
    hours: Iterable[int],
    now: BusinessNow,
) -> list[int]:
    return [hour for hour in hours if not is_past_hour(target_date, hour, now)]


def earliest_bookable_hour(now: BusinessNow) -> int:
    return now.hour + 1
