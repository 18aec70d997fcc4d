from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AssetCategory, AssetStatus
from .asset_model import Asset


class AssetRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, asset_id: int) -> Optional[Asset]:
        raise NotImplementedError

    def list(self, *, employee_id: Optional[int] = None, status: Optional[AssetStatus] = None) -> Sequence[Asset]:
        raise NotImplementedError

    def mark_returned(self, asset_id: int, *, return_date: datetime) -> bool:
        raise NotImplementedError
