from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DocumentCategory


@dataclass(frozen=True)
class Document:
    document_id: int
    name: str
    category: DocumentCategory
    file_key: str
    employee_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DeliveryItem:
    name: str
    size: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.name} (Talla: {self.size})" if self.size else self.name
