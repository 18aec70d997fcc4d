from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..model import DayTotals, TimeEntry


class WorkedTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def day_totals(self, entries: Sequence[TimeEntry]) -> DayTotals:
        """Totals for the punches of a single day, in any order."""
        raise NotImplementedError
