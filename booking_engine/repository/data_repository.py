"""Repository layer responsible for all database access."""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from booking_engine.domain.models import PlaceConfig, Reservation, WeekdayHours
from booking_engine.utils.config import Settings, get_settings
from booking_engine.utils.logger import get_logger
from booking_engine.utils.time_format import format_date, parse_date, parse_hour


logger = get_logger(__name__)


RESERVATION_STATUSES = ("pending", "approved", "rejected", "cancelled")
BLOCKING_STATUS = "approved"


class DataRepository:
    """Encapsulates SQLite access so the availability engine stays storage-agnostic.

    The engine only reads through ``get_place_config`` and the reservation
    queries. ``create_place``/``add_reservation`` exist for seeding.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Places (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        title TEXT NOT NULL,
                        check_in TEXT,
                        check_out TEXT,
                        weekday_time_slots TEXT NOT NULL DEFAULT '{}',
                        minimum_hours INTEGER,
                        cooldown_minutes INTEGER,
                        blocked_dates TEXT NOT NULL DEFAULT '[]',
                        blocked_weekdays TEXT NOT NULL DEFAULT '[]',
                        start_date TEXT,
                        end_date TEXT,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Reservations (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        place_id INTEGER NOT NULL,
                        date TEXT NOT NULL,
                        start_time TEXT NOT NULL,
                        end_time TEXT NOT NULL,
                        status TEXT NOT NULL DEFAULT 'approved',
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                        FOREIGN KEY (place_id) REFERENCES Places(id)
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_reservations_place_date_status
                    ON Reservations(place_id, date, status);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def create_place(
        self,
        *,
        title: str,
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        minimum_hours: Optional[int] = None,
        cooldown_minutes: Optional[int] = None,
        weekday_time_slots: Optional[dict[int, tuple[str, str]]] = None,
        blocked_dates: Iterable[str] = (),
        blocked_weekdays: Iterable[int] = (),
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> int:
        slots_payload = {
            str(weekday): {"start": start, "end": end}
            for weekday, (start, end) in (weekday_time_slots or {}).items()
        }
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO Places (
                    title, check_in, check_out, weekday_time_slots,
                    minimum_hours, cooldown_minutes, blocked_dates,
                    blocked_weekdays, start_date, end_date
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    title,
                    check_in,
                    check_out,
                    json.dumps(slots_payload),
                    minimum_hours,
                    cooldown_minutes,
                    json.dumps(list(blocked_dates)),
                    json.dumps(list(blocked_weekdays)),
                    start_date,
                    end_date,
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def add_reservation(
        self,
        *,
        place_id: int,
        date: str,
        start_time: str,
        end_time: str,
        status: str = BLOCKING_STATUS,
    ) -> int:
        if status not in RESERVATION_STATUSES:
            raise ValueError(f"status must be one of {', '.join(RESERVATION_STATUSES)}")
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO Reservations (place_id, date, start_time, end_time, status)
                VALUES (?, ?, ?, ?, ?);
                """,
                (place_id, date, start_time, end_time, status),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def count_places(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS count FROM Places;").fetchone()
            return int(row["count"])

    def get_place_config(self, place_id: int) -> Optional[PlaceConfig]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM Places WHERE id = ?;",
                (place_id,),
            ).fetchone()
        if row is None:
            return None
        return self._to_place_config(row)

    def _to_place_config(self, row: sqlite3.Row) -> PlaceConfig:
        weekday_hours = {
            int(weekday): WeekdayHours(
                start_hour=parse_hour(slot["start"]),
                end_hour=parse_hour(slot["end"]),
            )
            for weekday, slot in json.loads(row["weekday_time_slots"] or "{}").items()
            if slot.get("start") and slot.get("end")
        }
        minimum_hours = row["minimum_hours"]
        cooldown_minutes = row["cooldown_minutes"]
        return PlaceConfig(
            place_id=int(row["id"]),
            title=str(row["title"]),
            check_in_hour=parse_hour(row["check_in"] or self._settings.default_check_in),
            check_out_hour=parse_hour(row["check_out"] or self._settings.default_check_out),
            minimum_duration_hours=(
                int(minimum_hours)
                if minimum_hours is not None
                else self._settings.default_minimum_hours
            ),
            cooldown_minutes=(
                int(cooldown_minutes)
                if cooldown_minutes is not None
                else self._settings.default_cooldown_minutes
            ),
            weekday_hours=weekday_hours,
            blocked_dates=frozenset(
                parse_date(value) for value in json.loads(row["blocked_dates"] or "[]")
            ),
            blocked_weekdays=frozenset(
                int(value) for value in json.loads(row["blocked_weekdays"] or "[]")
            ),
            start_date=parse_date(row["start_date"]) if row["start_date"] else None,
            end_date=parse_date(row["end_date"]) if row["end_date"] else None,
        )

    def get_reservations(self, place_id: int, target_date: date) -> list[Reservation]:
        return self.get_reservations_between(place_id, target_date, target_date)

    def get_reservations_between(
        self,
        place_id: int,
        start_date: date,
        end_date: date,
    ) -> list[Reservation]:
        """Approved reservations of a place with ``start_date <= date <= end_date``."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, date, start_time, end_time
                FROM Reservations
                WHERE place_id = ?
                  AND status = ?
                  AND date BETWEEN ? AND ?
                ORDER BY date, start_time;
                """,
                (place_id, BLOCKING_STATUS, format_date(start_date), format_date(end_date)),
            ).fetchall()
        return [
            Reservation(
                date=parse_date(row["date"]),
                start_hour=parse_hour(row["start_time"]),
                end_hour=parse_hour(row["end_time"]),
                reservation_id=int(row["id"]),
            )
            for row in rows
        ]

    def seed_demo_place_if_empty(self) -> None:
        """Insert one demo room so a fresh install has something to query."""
        if self.count_places() > 0:
            logger.info("Places already present; skipping demo seed")
            return
        place_id = self.create_place(
            title="Demo meeting room",
            check_in=self._settings.default_check_in,
            check_out=self._settings.default_check_out,
            minimum_hours=self._settings.default_minimum_hours,
            cooldown_minutes=self._settings.default_cooldown_minutes,
            weekday_time_slots={6: ("10:00", "15:00")},
            blocked_weekdays=[0],
        )
        logger.info("Demo place seeded | place_id=%s", place_id)
