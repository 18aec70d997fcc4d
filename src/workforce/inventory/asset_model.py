from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AssetCategory, AssetStatus


@dataclass(frozen=True)
class Asset:
    """Material handed to an employee (uniform, EPI, device...)."""

    asset_id: int
    name: str
    category: AssetCategory
    status: AssetStatus
    employee_id: Optional[int] = None
    inventory_item_id: Optional[int] = None
    serial_number: Optional[str] = None
    assigned_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    notes: Optional[str] = None
