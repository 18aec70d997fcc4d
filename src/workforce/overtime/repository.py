from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import CategoryRate, OvertimeEntry


class CategoryRateRepository(Protocol):
    def list_all(self) -> Sequence[CategoryRate]:
        raise NotImplementedError

    def upsert(self, rate: CategoryRate) -> None:
        raise NotImplementedError


class OvertimeRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        hours: float,
        rate: float,
        total: float,
        status: RequestStatus = RequestStatus.PENDING,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, overtime_id: int) -> Optional[OvertimeEntry]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeEntry]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[OvertimeEntry]:
        raise NotImplementedError

    def update_status(self, overtime_id: int, status: RequestStatus) -> bool:
        raise NotImplementedError

    def delete(self, overtime_id: int) -> bool:
        raise NotImplementedError
