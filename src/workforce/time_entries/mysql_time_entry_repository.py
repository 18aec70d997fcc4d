from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds
from ..core.enums import TimeEntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import NewPunch, TimeEntry
from .repository import TimeEntryRepository

_SELECT = """
    SELECT t.entry_id, t.employee_id, t.entry_type, t.punched_at, t.location, t.device,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name, e.department
    FROM time_entries t
    JOIN employees e ON e.employee_id = t.employee_id
"""


def _row_to_entry(row: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(row["entry_id"]),
        employee_id=int(row["employee_id"]),
        entry_type=TimeEntryType(row["entry_type"]),
        punched_at=row["punched_at"],
        location=row.get("location"),
        device=row.get("device"),
        employee_name=row.get("employee_name"),
        department=row.get("department"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        entry_type: TimeEntryType,
        punched_at: datetime,
        location: Optional[str],
        device: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO time_entries(employee_id, entry_type, punched_at, location, device) VALUES(%s,%s,%s,%s,%s)",
                (int(employee_id), entry_type.value, punched_at, location, device),
            )
            return int(cur.lastrowid)

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.entry_id=%s", (int(entry_id),))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def last_for_day(self, employee_id: int, day: date) -> Optional[TimeEntry]:
        start, end = day_bounds(day)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE t.employee_id=%s AND t.punched_at >= %s AND t.punched_at < %s"
                + " ORDER BY t.punched_at DESC, t.entry_id DESC LIMIT 1",
                (int(employee_id), start, end),
            )
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def list_range(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["t.punched_at >= %s", "t.punched_at < %s"]
        params: list = [start, end]
        if employee_id is not None:
            clauses.append("t.employee_id=%s")
            params.append(int(employee_id))
        if department:
            clauses.append("e.department=%s")
            params.append(department)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where_clause(clauses)} ORDER BY t.employee_id, t.punched_at, t.entry_id",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def replace_day(self, employee_id: int, day: date, punches: Sequence[NewPunch]) -> int:
        start, end = day_bounds(day)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_entries WHERE employee_id=%s AND punched_at >= %s AND punched_at < %s",
                (int(employee_id), start, end),
            )
            for p in punches:
                cur.execute(
                    "INSERT INTO time_entries(employee_id, entry_type, punched_at, location, device) VALUES(%s,%s,%s,%s,%s)",
                    (int(employee_id), p.entry_type.value, p.punched_at, p.location, p.device),
                )
            return len(punches)

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
