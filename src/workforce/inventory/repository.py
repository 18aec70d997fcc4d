from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AssetCategory, MovementType
from .model import InventoryItem, InventoryMovement


class InventoryRepository(Protocol):
    def list_items(self) -> Sequence[InventoryItem]:
        raise NotImplementedError

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        raise NotImplementedError

    def find_item(self, *, name: str, size: Optional[str]) -> Optional[InventoryItem]:
        """Exact name + size match (size None matches items without size)."""
        raise NotImplementedError

    def find_in_stock_by_name(self, name: str) -> Optional[InventoryItem]:
        """First item with that name (case-insensitive) and quantity > 0."""
        raise NotImplementedError

    def create_item(
        self, *, name: str, category: AssetCategory, size: Optional[str], quantity: int, min_quantity: int
    ) -> int:
        raise NotImplementedError

    def update_item(
        self, item_id: int, *, name: str, category: AssetCategory, size: Optional[str], min_quantity: int
    ) -> bool:
        raise NotImplementedError

    def delete_item(self, item_id: int) -> bool:
        raise NotImplementedError

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
        raise NotImplementedError

    def adjust_quantity(self, item_id: int, delta: int) -> bool:
        raise NotImplementedError

    def list_movements(self, item_id: int) -> Sequence[InventoryMovement]:
        raise NotImplementedError
