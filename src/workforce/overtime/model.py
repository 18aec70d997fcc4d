from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class CategoryRate:
    """Hourly overtime prices for a professional category."""

    category: str
    overtime_rate: float
    holiday_overtime_rate: float


@dataclass(frozen=True)
class OvertimeEntry:
    overtime_id: int
    employee_id: int
    work_date: date
    hours: float
    rate: float
    total: float
    status: RequestStatus = RequestStatus.PENDING
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    message: str
    imported: int
    errors: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
