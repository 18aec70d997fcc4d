from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, VacationType
from .model import Vacation


class VacationRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        vacation_type: VacationType,
        status: RequestStatus,
        business_days: int,
        reason: Optional[str],
        decided_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, vacation_id: int) -> Optional[Vacation]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[Vacation]:
        raise NotImplementedError

    def find_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Vacation]:
        """Non-rejected absences of the employee intersecting [start_date, end_date]."""
        raise NotImplementedError

    def sum_days(self, *, employee_id: int, year: int, vacation_type: VacationType, status: RequestStatus) -> int:
        """Business days of the given type/status whose start date falls in ``year``."""
        raise NotImplementedError

    def decide(self, *, vacation_id: int, status: RequestStatus, decided_by: int, decided_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, vacation_id: int) -> bool:
        raise NotImplementedError
