from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import TimeEntryType


@dataclass(frozen=True)
class TimeEntry:
    """A single clock punch (fichaje)."""

    entry_id: int
    employee_id: int
    entry_type: TimeEntryType
    punched_at: datetime
    location: Optional[str] = None
    device: Optional[str] = None
    employee_name: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class NewPunch:
    entry_type: TimeEntryType
    punched_at: datetime
    location: Optional[str] = None
    device: Optional[str] = None


@dataclass(frozen=True)
class DayTotals:
    worked_minutes: int
    lunch_minutes: int
    complete: bool


@dataclass(frozen=True)
class DaySummary:
    employee_id: int
    work_date: date
    first_in: Optional[datetime]
    last_out: Optional[datetime]
    worked_minutes: int
    lunch_minutes: int
    complete: bool
    entries: list[TimeEntry] = field(default_factory=list)


@dataclass(frozen=True)
class MonthSummary:
    employee_id: int
    year: int
    month: int
    days: list[DaySummary]
    total_hours: float
    lunch_hours: float
    days_worked: int
    days_incomplete: int
