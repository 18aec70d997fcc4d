from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PayrollBatchStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import PayrollBatch, PayrollRow, PayrollRowData
from .repository import PayrollRepository


def _batch(r: dict) -> PayrollBatch:
    return PayrollBatch(
        batch_id=int(r["batch_id"]),
        year=int(r["year"]),
        month=int(r["month"]),
        source_filename=r["source_filename"],
        file_key=r["file_key"],
        status=PayrollBatchStatus(r["status"]),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_batch(
        self, *, year: int, month: int, source_filename: str, file_key: str, created_by: Optional[int]
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_batches(year, month, source_filename, file_key, status, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(year), int(month), source_filename, file_key, PayrollBatchStatus.UPLOADED.value, created_by),
            )
            return int(cur.lastrowid)

    def get_batch(self, batch_id: int) -> Optional[PayrollBatch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM payroll_batches WHERE batch_id=%s", (int(batch_id),))
            r = fetchone(cur)
            return _batch(r) if r else None

    def list_batches(self, *, limit: int = 100) -> Sequence[PayrollBatch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT * FROM payroll_batches ORDER BY year DESC, month DESC, batch_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_batch(r) for r in fetchall(cur)]

    def set_status(self, batch_id: int, status: PayrollBatchStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE payroll_batches SET status=%s WHERE batch_id=%s", (status.value, int(batch_id)))
            return cur.rowcount > 0

    def replace_rows(self, batch_id: int, rows: Sequence[PayrollRowData]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_rows WHERE batch_id=%s", (int(batch_id),))
            if rows:
                cur.executemany(
                    """
                    INSERT INTO payroll_rows(
                        batch_id, raw_employee_name, employee_dni, employee_id,
                        gross, ss_company, ss_employee, irpf, net, extra_data
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            int(batch_id),
                            r.raw_employee_name,
                            r.employee_dni,
                            r.employee_id,
                            r.gross,
                            r.ss_company,
                            r.ss_employee,
                            r.irpf,
                            r.net,
                            dump_json(r.extra_data),
                        )
                        for r in rows
                    ],
                )
            return len(rows)

    def list_rows(self, batch_id: int) -> Sequence[PayrollRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM payroll_rows WHERE batch_id=%s ORDER BY row_id", (int(batch_id),))
            return [
                PayrollRow(
                    row_id=int(r["row_id"]),
                    batch_id=int(r["batch_id"]),
                    raw_employee_name=r["raw_employee_name"],
                    employee_dni=r.get("employee_dni"),
                    employee_id=r.get("employee_id"),
                    gross=as_float(r.get("gross")),
                    ss_company=as_float(r.get("ss_company")),
                    ss_employee=as_float(r.get("ss_employee")),
                    irpf=as_float(r.get("irpf")),
                    net=as_float(r.get("net")),
                    extra_data=load_json(r.get("extra_data"), {}),
                    status=r.get("status") or "PENDING",
                )
                for r in fetchall(cur)
            ]
