from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AssetCategory, MovementType


@dataclass(frozen=True)
class InventoryItem:
    item_id: int
    name: str
    category: AssetCategory
    size: Optional[str]
    quantity: int
    min_quantity: int

    @property
    def label(self) -> str:
        return f"{self.name} (Talla {self.size})" if self.size else self.name


@dataclass(frozen=True)
class InventoryMovement:
    movement_id: int
    item_id: int
    movement_type: MovementType
    quantity: int
    user_id: Optional[int] = None
    employee_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
