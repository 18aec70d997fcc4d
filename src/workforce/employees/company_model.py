from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_ALLOWED_RADIUS = 100


@dataclass(frozen=True)
class Company:
    company_id: int
    name: str
    cif: Optional[str] = None
    office_latitude: Optional[float] = None
    office_longitude: Optional[float] = None
    # metres around the office where punches are expected
    allowed_radius: int = DEFAULT_ALLOWED_RADIUS

    @property
    def has_office_location(self) -> bool:
        return self.office_latitude is not None and self.office_longitude is not None
