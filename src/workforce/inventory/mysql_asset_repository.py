from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AssetCategory, AssetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .asset_model import Asset
from .asset_repository import AssetRepository

_COLUMNS = (
    "asset_id, employee_id, inventory_item_id, category, name, serial_number, status, "
    "assigned_date, return_date, notes"
)


def _row_to_asset(row: dict) -> Asset:
    return Asset(
        asset_id=int(row["asset_id"]),
        employee_id=row.get("employee_id"),
        inventory_item_id=row.get("inventory_item_id"),
        category=AssetCategory(row["category"]),
        name=row["name"],
        serial_number=row.get("serial_number"),
        status=AssetStatus(row["status"]),
        assigned_date=row.get("assigned_date"),
        return_date=row.get("return_date"),
        notes=row.get("notes"),
    )


class MySQLAssetRepository(AssetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: Optional[int],
        inventory_item_id: Optional[int],
        category: AssetCategory,
        name: str,
        serial_number: Optional[str],
        assigned_date: datetime,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assets(employee_id, inventory_item_id, category, name, serial_number, status,
                                   assigned_date, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    inventory_item_id,
                    category.value,
                    name,
                    serial_number,
                    AssetStatus.ASSIGNED.value,
                    assigned_date,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, asset_id: int) -> Optional[Asset]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assets WHERE asset_id=%s", (int(asset_id),))
            row = fetchone(cur)
            return _row_to_asset(row) if row else None

    def list(self, *, employee_id: Optional[int] = None, status: Optional[AssetStatus] = None) -> Sequence[Asset]:
        clauses: list[str] = []
        params: list = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assets WHERE {where_clause(clauses)} ORDER BY assigned_date DESC, asset_id DESC",
                tuple(params),
            )
            return [_row_to_asset(r) for r in fetchall(cur)]

    def mark_returned(self, asset_id: int, *, return_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE assets SET status=%s, return_date=%s WHERE asset_id=%s AND status=%s",
                (AssetStatus.RETURNED.value, return_date, int(asset_id), AssetStatus.ASSIGNED.value),
            )
            return cur.rowcount > 0
