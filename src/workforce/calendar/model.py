from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union


@dataclass(frozen=True)
class CalendarEvent:
    """Corporate event stored in ``calendar_events``."""

    event_id: int
    title: str
    start_date: datetime
    end_date: datetime
    all_day: bool = True
    event_type: str = "EVENT"
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[str] = None
    company_id: Optional[int] = None
    is_public: bool = True
    created_by: Optional[int] = None


@dataclass(frozen=True)
class CalendarEventData:
    title: str
    start_date: datetime
    end_date: datetime
    all_day: bool = True
    event_type: str = "EVENT"
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[str] = None
    company_id: Optional[int] = None
    is_public: bool = True


@dataclass(frozen=True)
class UnifiedEvent:
    """One entry of the merged calendar view."""

    id: str
    title: str
    start: Union[date, datetime]
    end: Union[date, datetime]
    all_day: bool
    type: str
    color: str
    description: Optional[str] = None
    location: Optional[str] = None
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None
