from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, VacationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Vacation
from .repository import VacationRepository

_SELECT = """
    SELECT v.vacation_id, v.employee_id, v.start_date, v.end_date, v.vacation_type, v.status,
           v.business_days, v.reason, v.decided_by, v.decided_at, v.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM vacations v
    JOIN employees e ON e.employee_id = v.employee_id
"""


def _row_to_vacation(row: dict) -> Vacation:
    return Vacation(
        vacation_id=int(row["vacation_id"]),
        employee_id=int(row["employee_id"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        vacation_type=VacationType(row["vacation_type"]),
        status=RequestStatus(row["status"]),
        business_days=int(row.get("business_days") or 0),
        reason=row.get("reason"),
        decided_by=row.get("decided_by"),
        decided_at=row.get("decided_at"),
        created_at=row.get("created_at"),
        employee_name=row.get("employee_name"),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        vacation_type: VacationType,
        status: RequestStatus,
        business_days: int,
        reason: Optional[str],
        decided_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacations(employee_id, start_date, end_date, vacation_type, status,
                                      business_days, reason, decided_by, decided_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    start_date,
                    end_date,
                    vacation_type.value,
                    status.value,
                    int(business_days),
                    reason,
                    decided_by,
                    decided_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, vacation_id: int) -> Optional[Vacation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE v.vacation_id=%s", (int(vacation_id),))
            row = fetchone(cur)
            return _row_to_vacation(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[Vacation]:
        clauses: list[str] = []
        params: list = []
        if employee_id is not None:
            clauses.append("v.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("v.status=%s")
            params.append(status.value)
        if start is not None:
            clauses.append("v.end_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("v.start_date <= %s")
            params.append(end)
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where_clause(clauses)} ORDER BY v.start_date DESC LIMIT %s", tuple(params))
            return [_row_to_vacation(r) for r in fetchall(cur)]

    def find_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Vacation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE v.employee_id=%s AND v.status <> %s AND v.start_date <= %s AND v.end_date >= %s",
                (int(employee_id), RequestStatus.REJECTED.value, end_date, start_date),
            )
            return [_row_to_vacation(r) for r in fetchall(cur)]

    def sum_days(self, *, employee_id: int, year: int, vacation_type: VacationType, status: RequestStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(business_days), 0) AS days
                FROM vacations
                WHERE employee_id=%s AND vacation_type=%s AND status=%s AND YEAR(start_date)=%s
                """,
                (int(employee_id), vacation_type.value, status.value, int(year)),
            )
            row = fetchone(cur)
            return int(row["days"]) if row else 0

    def decide(self, *, vacation_id: int, status: RequestStatus, decided_by: int, decided_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacations SET status=%s, decided_by=%s, decided_at=%s
                WHERE vacation_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, int(vacation_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete(self, vacation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM vacations WHERE vacation_id=%s", (int(vacation_id),))
            return cur.rowcount > 0
