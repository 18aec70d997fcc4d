from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ...core.enums import TimeEntryType
from ..model import DayTotals, TimeEntry
from .base import WorkedTimeCalculator


def _minutes(start: datetime, end: datetime) -> int:
    return max(int((end - start).total_seconds() // 60), 0)


class StandardWorkedTimeCalculator(WorkedTimeCalculator):
    """Standard rule: IN->LUNCH_START/OUT plus LUNCH_END->OUT; lunch is LUNCH_START->LUNCH_END.

    A day with an interval left open (IN or LUNCH_END without OUT, lunch
    without end) is incomplete; the open interval is not counted.
    """

    def day_totals(self, entries: Sequence[TimeEntry]) -> DayTotals:
        worked = 0
        lunch = 0
        open_at: Optional[datetime] = None
        lunch_at: Optional[datetime] = None

        for e in sorted(entries, key=lambda x: x.punched_at):
            if e.entry_type == TimeEntryType.IN:
                open_at = e.punched_at
            elif e.entry_type == TimeEntryType.LUNCH_START:
                if open_at is not None:
                    worked += _minutes(open_at, e.punched_at)
                    open_at = None
                lunch_at = e.punched_at
            elif e.entry_type == TimeEntryType.LUNCH_END:
                if lunch_at is not None:
                    lunch += _minutes(lunch_at, e.punched_at)
                    lunch_at = None
                open_at = e.punched_at
            elif e.entry_type == TimeEntryType.OUT:
                if open_at is not None:
                    worked += _minutes(open_at, e.punched_at)
                    open_at = None

        complete = bool(entries) and open_at is None and lunch_at is None
        return DayTotals(worked_minutes=worked, lunch_minutes=lunch, complete=complete)
