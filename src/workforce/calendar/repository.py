from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import CalendarEvent, CalendarEventData


class CalendarEventRepository(Protocol):
    def list_in_range(self, *, start: datetime, end: datetime, company_id: Optional[int]) -> Sequence[CalendarEvent]:
        """Events intersecting [start, end] that belong to ``company_id`` or are public and company-less."""
        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[CalendarEvent]:
        raise NotImplementedError

    def create(self, data: CalendarEventData, *, created_by: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, event_id: int, data: CalendarEventData) -> bool:
        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        raise NotImplementedError
