from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, VacationType


@dataclass(frozen=True)
class Vacation:
    vacation_id: int
    employee_id: int
    start_date: date
    end_date: date
    vacation_type: VacationType
    status: RequestStatus
    business_days: int
    reason: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class VacationBalance:
    employee_id: int
    year: int
    total: int
    used: int
    pending: int
    available: int
