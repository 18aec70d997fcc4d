from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AssetCategory, MovementType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import InventoryItem, InventoryMovement
from .repository import InventoryRepository

_ITEM_COLUMNS = "item_id, name, category, size, quantity, min_quantity"


def _row_to_item(row: dict) -> InventoryItem:
    return InventoryItem(
        item_id=int(row["item_id"]),
        name=row["name"],
        category=AssetCategory(row["category"]),
        size=row.get("size"),
        quantity=int(row["quantity"]),
        min_quantity=int(row["min_quantity"]),
    )


class MySQLInventoryRepository(InventoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_items(self) -> Sequence[InventoryItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ITEM_COLUMNS} FROM inventory_items ORDER BY name, size")
            return [_row_to_item(r) for r in fetchall(cur)]

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ITEM_COLUMNS} FROM inventory_items WHERE item_id=%s", (int(item_id),))
            row = fetchone(cur)
            return _row_to_item(row) if row else None

    def find_item(self, *, name: str, size: Optional[str]) -> Optional[InventoryItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ITEM_COLUMNS} FROM inventory_items WHERE name=%s AND size <=> %s",
                (name, size),
            )
            row = fetchone(cur)
            return _row_to_item(row) if row else None

    def find_in_stock_by_name(self, name: str) -> Optional[InventoryItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ITEM_COLUMNS} FROM inventory_items
                WHERE LOWER(name)=LOWER(%s) AND quantity > 0
                ORDER BY quantity DESC LIMIT 1
                """,
                (name,),
            )
            row = fetchone(cur)
            return _row_to_item(row) if row else None

    def create_item(
        self, *, name: str, category: AssetCategory, size: Optional[str], quantity: int, min_quantity: int
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO inventory_items(name, category, size, quantity, min_quantity) VALUES(%s,%s,%s,%s,%s)",
                (name, category.value, size, int(quantity), int(min_quantity)),
            )
            return int(cur.lastrowid)

    def update_item(
        self, item_id: int, *, name: str, category: AssetCategory, size: Optional[str], min_quantity: int
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE inventory_items SET name=%s, category=%s, size=%s, min_quantity=%s WHERE item_id=%s",
                (name, category.value, size, int(min_quantity), int(item_id)),
            )
            return cur.rowcount >= 0

    def delete_item(self, item_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM inventory_items WHERE item_id=%s", (int(item_id),))
            return cur.rowcount > 0

    def add_movement(
        self,
        *,
        item_id: int,
        movement_type: MovementType,
        quantity: int,
        user_id: Optional[int],
        employee_id: Optional[int],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO inventory_movements(item_id, movement_type, quantity, user_id, employee_id, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(item_id), movement_type.value, int(quantity), user_id, employee_id, notes),
            )
            return int(cur.lastrowid)

    def adjust_quantity(self, item_id: int, delta: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE inventory_items SET quantity = quantity + %s WHERE item_id=%s", (int(delta), int(item_id)))
            return cur.rowcount > 0

    def list_movements(self, item_id: int) -> Sequence[InventoryMovement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT movement_id, item_id, movement_type, quantity, user_id, employee_id, notes, created_at
                FROM inventory_movements WHERE item_id=%s ORDER BY created_at DESC, movement_id DESC
                """,
                (int(item_id),),
            )
            return [
                InventoryMovement(
                    movement_id=int(r["movement_id"]),
                    item_id=int(r["item_id"]),
                    movement_type=MovementType(r["movement_type"]),
                    quantity=int(r["quantity"]),
                    user_id=r.get("user_id"),
                    employee_id=r.get("employee_id"),
                    notes=r.get("notes"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
