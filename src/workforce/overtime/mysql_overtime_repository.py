from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, where_clause
from .model import CategoryRate, OvertimeEntry
from .repository import CategoryRateRepository, OvertimeRepository

_SELECT = """
    SELECT o.overtime_id, o.employee_id, o.work_date, o.hours, o.rate, o.total, o.status,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM overtime_entries o
    JOIN employees e ON e.employee_id = o.employee_id
"""


def _row_to_entry(row: dict) -> OvertimeEntry:
    return OvertimeEntry(
        overtime_id=int(row["overtime_id"]),
        employee_id=int(row["employee_id"]),
        work_date=row["work_date"],
        hours=as_float(row["hours"]),
        rate=as_float(row["rate"]),
        total=as_float(row["total"]),
        status=RequestStatus(row["status"]),
        employee_name=row.get("employee_name"),
    )


class MySQLCategoryRateRepository(CategoryRateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[CategoryRate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT category, overtime_rate, holiday_overtime_rate FROM category_rates ORDER BY category")
            return [
                CategoryRate(
                    category=r["category"],
                    overtime_rate=as_float(r["overtime_rate"]),
                    holiday_overtime_rate=as_float(r["holiday_overtime_rate"]),
                )
                for r in fetchall(cur)
            ]

    def upsert(self, rate: CategoryRate) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO category_rates(category, overtime_rate, holiday_overtime_rate)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE overtime_rate=VALUES(overtime_rate),
                                        holiday_overtime_rate=VALUES(holiday_overtime_rate)
                """,
                (rate.category, rate.overtime_rate, rate.holiday_overtime_rate),
            )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        hours: float,
        rate: float,
        total: float,
        status: RequestStatus = RequestStatus.PENDING,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_entries(employee_id, work_date, hours, rate, total, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, hours, rate, total, status.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, overtime_id: int) -> Optional[OvertimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE o.overtime_id=%s", (int(overtime_id),))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE o.employee_id=%s ORDER BY o.work_date DESC", (int(employee_id),))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[OvertimeEntry]:
        clauses = ["o.work_date >= %s", "o.work_date <= %s"]
        params: list = [start, end]
        if employee_id is not None:
            clauses.append("o.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("o.status=%s")
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where_clause(clauses)} ORDER BY o.work_date", tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def update_status(self, overtime_id: int, status: RequestStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE overtime_entries SET status=%s WHERE overtime_id=%s", (status.value, int(overtime_id)))
            return cur.rowcount >= 0

    def delete(self, overtime_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM overtime_entries WHERE overtime_id=%s", (int(overtime_id),))
            return cur.rowcount > 0
