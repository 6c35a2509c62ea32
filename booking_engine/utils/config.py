"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    database_path: Path
    business_timezone_name: str
    business_utc_offset_hours: int
    default_check_in: str
    default_check_out: str
    default_minimum_hours: int
    default_cooldown_minutes: int
    calendar_max_days: int
    booking_horizon_days: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests call ``get_settings.cache_clear()``."""
    return Settings(
        app_name=_env_str("APP_NAME", "Hourly Room Availability"),
        app_version=_env_str("APP_VERSION", "0.1.0"),
        log_level=_env_str("LOG_LEVEL", "INFO"),
        database_path=Path(
            _env_str("DATABASE_PATH", str(PROJECT_ROOT / "data" / "booking.db"))
        ),
        business_timezone_name=_env_str("BUSINESS_TIMEZONE", "Asia/Tashkent"),
        business_utc_offset_hours=_env_int("BUSINESS_UTC_OFFSET_HOURS", 5),
        default_check_in=_env_str("DEFAULT_CHECK_IN", "09:00"),
        default_check_out=_env_str("DEFAULT_CHECK_OUT", "17:00"),
        default_minimum_hours=_env_int("DEFAULT_MINIMUM_HOURS", 1),
        default_cooldown_minutes=_env_int("DEFAULT_COOLDOWN_MINUTES", 30),
        calendar_max_days=_env_int("CALENDAR_MAX_DAYS", 93),
        booking_horizon_days=_env_int("BOOKING_HORIZON_DAYS", 365),
    )
