from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    employee_id: int
    dni: str
    first_name: str
    last_name: str
    company_id: Optional[int] = None
    email: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    category: Optional[str] = None
    birth_date: Optional[date] = None
    hire_date: Optional[date] = None
    manager_id: Optional[int] = None
    vacation_days_total: int = 30
    is_active: bool = True
    exit_date: Optional[date] = None
    exit_reason: Optional[str] = None
    company_name: Optional[str] = None
    company_cif: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class EmployeeData:
    """Writable fields of an employee record (create / update payload)."""

    dni: str
    first_name: str
    last_name: str
    company_id: Optional[int] = None
    email: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    category: Optional[str] = None
    birth_date: Optional[date] = None
    hire_date: Optional[date] = None
    manager_id: Optional[int] = None
    # None: the configured default on create, the current quota on update
    vacation_days_total: Optional[int] = None


@dataclass(frozen=True)
class EmployeeImportResult:
    created: int
    updated: int
    errors: list[str]

    @property
    def imported(self) -> int:
        return self.created + self.updated
