from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import PayrollBatchStatus


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


@dataclass(frozen=True)
class PayrollBatch:
    """An uploaded payroll spreadsheet waiting for (or after) column mapping."""

    batch_id: int
    year: int
    month: int
    source_filename: str
    file_key: str
    status: PayrollBatchStatus
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollRowData:
    raw_employee_name: str
    employee_dni: Optional[str]
    employee_id: Optional[int]
    gross: float
    ss_company: float
    ss_employee: float
    irpf: float
    net: float
    extra_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PayrollRow:
    row_id: int
    batch_id: int
    raw_employee_name: str
    employee_dni: Optional[str]
    employee_id: Optional[int]
    gross: float
    ss_company: float
    ss_employee: float
    irpf: float
    net: float
    extra_data: dict[str, Any] = field(default_factory=dict)
    status: str = "PENDING"


@dataclass(frozen=True)
class UploadResult:
    batch_id: int
    headers: list[str]
    message: str
