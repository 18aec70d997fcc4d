from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CalendarEvent, CalendarEventData
from .repository import CalendarEventRepository

_COLUMNS = (
    "event_id, title, description, location, start_date, end_date, all_day, event_type, "
    "color, company_id, is_public, created_by"
)


def _row_to_event(row: dict) -> CalendarEvent:
    return CalendarEvent(
        event_id=int(row["event_id"]),
        title=row["title"],
        description=row.get("description"),
        location=row.get("location"),
        start_date=row["start_date"],
        end_date=row["end_date"],
        all_day=bool(row.get("all_day", True)),
        event_type=row.get("event_type") or "EVENT",
        color=row.get("color"),
        company_id=row.get("company_id"),
        is_public=bool(row.get("is_public", True)),
        created_by=row.get("created_by"),
    )


def _data_params(data: CalendarEventData) -> tuple:
    return (
        data.title,
        data.description,
        data.location,
        data.start_date,
        data.end_date,
        1 if data.all_day else 0,
        data.event_type,
        data.color,
        data.company_id,
        1 if data.is_public else 0,
    )


class MySQLCalendarEventRepository(CalendarEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_in_range(self, *, start: datetime, end: datetime, company_id: Optional[int]) -> Sequence[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM calendar_events
                WHERE start_date <= %s AND end_date >= %s
                  AND ((company_id IS NOT NULL AND company_id = %s) OR (is_public = 1 AND company_id IS NULL))
                ORDER BY start_date
                """,
                (end, start, company_id),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def get_by_id(self, event_id: int) -> Optional[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM calendar_events WHERE event_id=%s", (int(event_id),))
            row = fetchone(cur)
            return _row_to_event(row) if row else None

    def create(self, data: CalendarEventData, *, created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendar_events(title, description, location, start_date, end_date, all_day,
                                            event_type, color, company_id, is_public, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _data_params(data) + (created_by,),
            )
            return int(cur.lastrowid)

    def update(self, event_id: int, data: CalendarEventData) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE calendar_events
                SET title=%s, description=%s, location=%s, start_date=%s, end_date=%s, all_day=%s,
                    event_type=%s, color=%s, company_id=%s, is_public=%s
                WHERE event_id=%s
                """,
                _data_params(data) + (int(event_id),),
            )
            return cur.rowcount >= 0

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
