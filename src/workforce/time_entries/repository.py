from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeEntryType
from .model import NewPunch, TimeEntry


class TimeEntryRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        entry_type: TimeEntryType,
        punched_at: datetime,
        location: Optional[str],
        device: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def last_for_day(self, employee_id: int, day: date) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[TimeEntry]:
        """Punches with ``start <= punched_at < end`` ordered by employee and time."""
        raise NotImplementedError

    def replace_day(self, employee_id: int, day: date, punches: Sequence[NewPunch]) -> int:
        """Delete the day's punches and insert ``punches`` in one transaction."""
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
