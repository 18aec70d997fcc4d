from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .company_model import Company


class CompanyRepository(Protocol):
    def list_all(self) -> Sequence[Company]:
        raise NotImplementedError

    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        cif: Optional[str],
        office_latitude: Optional[float] = None,
        office_longitude: Optional[float] = None,
        allowed_radius: int = 100,
    ) -> int:
        raise NotImplementedError
