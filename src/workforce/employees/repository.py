from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeData


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_dni(self, dni: str) -> Optional[Employee]:
        raise NotImplementedError

    def list(
        self,
        *,
        search: Optional[str] = None,
        company_id: Optional[int] = None,
        active: Optional[bool] = None,
        limit: int = 500,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, data: EmployeeData) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, data: EmployeeData) -> bool:
        raise NotImplementedError

    def deactivate(self, employee_id: int, *, exit_date: date, exit_reason: Optional[str]) -> bool:
        raise NotImplementedError
