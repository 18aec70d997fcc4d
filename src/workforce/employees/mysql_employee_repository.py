from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_VACATION_DAYS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Employee, EmployeeData
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.company_id, e.dni, e.first_name, e.last_name, e.email,
           e.job_title, e.department, e.category, e.birth_date, e.hire_date,
           e.manager_id, e.vacation_days_total, e.is_active, e.exit_date, e.exit_reason,
           c.name AS company_name, c.cif AS company_cif
    FROM employees e
    LEFT JOIN companies c ON c.company_id = e.company_id
"""


def _row_to_employee(row: dict) -> Employee:
    quota = row.get("vacation_days_total")
    return Employee(
        employee_id=int(row["employee_id"]),
        company_id=row.get("company_id"),
        dni=row["dni"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row.get("email"),
        job_title=row.get("job_title"),
        department=row.get("department"),
        category=row.get("category"),
        birth_date=row.get("birth_date"),
        hire_date=row.get("hire_date"),
        manager_id=row.get("manager_id"),
        vacation_days_total=DEFAULT_VACATION_DAYS if quota is None else int(quota),
        is_active=bool(row.get("is_active", True)),
        exit_date=row.get("exit_date"),
        exit_reason=row.get("exit_reason"),
        company_name=row.get("company_name"),
        company_cif=row.get("company_cif"),
    )


def _data_params(data: EmployeeData) -> tuple:
    return (
        data.company_id,
        data.dni,
        data.first_name,
        data.last_name,
        data.email,
        data.job_title,
        data.department,
        data.category,
        data.birth_date,
        data.hire_date,
        data.manager_id,
        int(data.vacation_days_total),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_dni(self, dni: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.dni=%s", (dni,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list(
        self,
        *,
        search: Optional[str] = None,
        company_id: Optional[int] = None,
        active: Optional[bool] = None,
        limit: int = 500,
    ) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list = []
        if search:
            like = f"%{search}%"
            clauses.append("(e.first_name LIKE %s OR e.last_name LIKE %s OR e.dni LIKE %s OR e.email LIKE %s)")
            params.extend([like, like, like, like])
        if company_id is not None:
            clauses.append("e.company_id=%s")
            params.append(int(company_id))
        if active is not None:
            clauses.append("e.is_active=%s")
            params.append(1 if active else 0)

        sql = _SELECT + f" WHERE {where_clause(clauses)} ORDER BY e.last_name, e.first_name LIMIT %s"
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, data: EmployeeData) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(company_id, dni, first_name, last_name, email, job_title,
                                      department, category, birth_date, hire_date, manager_id,
                                      vacation_days_total)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _data_params(data),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, data: EmployeeData) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET company_id=%s, dni=%s, first_name=%s, last_name=%s, email=%s, job_title=%s,
                    department=%s, category=%s, birth_date=%s, hire_date=%s, manager_id=%s,
                    vacation_days_total=%s
                WHERE employee_id=%s
                """,
                _data_params(data) + (int(employee_id),),
            )
            return cur.rowcount >= 0

    def deactivate(self, employee_id: int, *, exit_date: date, exit_reason: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=0, exit_date=%s, exit_reason=%s WHERE employee_id=%s",
                (exit_date, exit_reason, int(employee_id)),
            )
            return cur.rowcount > 0
