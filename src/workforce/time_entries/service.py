from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..anomalies.service import AnomalyService
from ..common.datetime_utils import day_bounds, iter_days, month_bounds, now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text
from ..core.enums import TimeEntryType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator
from .model import DaySummary, MonthSummary, NewPunch, TimeEntry
from .repository import TimeEntryRepository

log = get_logger("time_entries")

# last punch of the day -> punches allowed next
ALLOWED_TRANSITIONS: dict[Optional[TimeEntryType], frozenset[TimeEntryType]] = {
    None: frozenset({TimeEntryType.IN}),
    TimeEntryType.OUT: frozenset({TimeEntryType.IN}),
    TimeEntryType.IN: frozenset({TimeEntryType.LUNCH_START, TimeEntryType.OUT}),
    TimeEntryType.LUNCH_START: frozenset({TimeEntryType.LUNCH_END}),
    TimeEntryType.LUNCH_END: frozenset({TimeEntryType.OUT}),
}

_LABELS = {
    TimeEntryType.IN: "entrada",
    TimeEntryType.LUNCH_START: "inicio de comida",
    TimeEntryType.LUNCH_END: "fin de comida",
    TimeEntryType.OUT: "salida",
}


class TimeEntryService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[WorkedTimeCalculator] = None,
        anomalies: Optional[AnomalyService] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._entries = entries
        self._employees = employees
        self._calculator = calculator or StandardWorkedTimeCalculator()
        self._anomalies = anomalies
        self._clock = clock

    @property
    def calculator(self) -> WorkedTimeCalculator:
        return self._calculator

    def clock(
        self,
        employee_id: int,
        entry_type: TimeEntryType,
        *,
        now: Optional[datetime] = None,
        location: Optional[str] = None,
        device: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        now = now or self._clock()

        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")
        if not emp.is_active:
            raise ValidationError("El empleado está dado de baja")

        last = self._entries.last_for_day(emp.employee_id, now.date())
        last_type = last.entry_type if last else None
        if entry_type not in ALLOWED_TRANSITIONS[last_type]:
            if last_type is None:
                raise ValidationError("Debes fichar la entrada primero")
            raise ValidationError(
                f"No puedes fichar {_LABELS[entry_type]} después de {_LABELS[last_type]}"
            )

        entry_id = self._entries.create(
            employee_id=emp.employee_id,
            entry_type=entry_type,
            punched_at=now,
            location=optional_text(location),
            device=optional_text(device),
        )
        log.info("Employee %s clocked %s at %s", emp.employee_id, entry_type.value, now.isoformat(timespec="minutes"))
        if self._anomalies is not None:
            entry = TimeEntry(
                entry_id=entry_id,
                employee_id=emp.employee_id,
                entry_type=entry_type,
                punched_at=now,
                location=optional_text(location),
                device=optional_text(device),
            )
            try:
                self._anomalies.detect_time_entry(entry, latitude=latitude, longitude=longitude)
            except Exception:
                # the punch is already stored; scoring must not undo it
                log.exception("Anomaly detection failed for time entry %s", entry_id)
        return entry_id

    def _summaries(self, employee_id: int, entries: Sequence[TimeEntry], start: date, end: date) -> list[DaySummary]:
        by_day: dict[date, list[TimeEntry]] = defaultdict(list)
        for e in entries:
            by_day[e.punched_at.date()].append(e)

        out: list[DaySummary] = []
        for day in iter_days(start, end):
            day_entries = sorted(by_day.get(day, []), key=lambda x: x.punched_at)
            if not day_entries:
                continue
            totals = self._calculator.day_totals(day_entries)
            ins = [e.punched_at for e in day_entries if e.entry_type == TimeEntryType.IN]
            outs = [e.punched_at for e in day_entries if e.entry_type == TimeEntryType.OUT]
            out.append(
                DaySummary(
                    employee_id=int(employee_id),
                    work_date=day,
                    first_in=ins[0] if ins else None,
                    last_out=outs[-1] if outs else None,
                    worked_minutes=totals.worked_minutes,
                    lunch_minutes=totals.lunch_minutes,
                    complete=totals.complete,
                    entries=day_entries,
                )
            )
        return out

    def day_summaries(self, employee_id: int, start: date, end: date) -> list[DaySummary]:
        if end < start:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")
        entries = self._entries.list_range(
            start=day_bounds(start)[0], end=day_bounds(end)[1], employee_id=int(employee_id)
        )
        return self._summaries(employee_id, entries, start, end)

    def month_summary(self, employee_id: int, year: int, month: int) -> MonthSummary:
        first, last = month_bounds(year, month)
        days = self.day_summaries(employee_id, first, last)
        worked = sum(d.worked_minutes for d in days)
        lunch = sum(d.lunch_minutes for d in days)
        return MonthSummary(
            employee_id=int(employee_id),
            year=int(year),
            month=int(month),
            days=days,
            total_hours=round(worked / 60, 2),
            lunch_hours=round(lunch / 60, 2),
            days_worked=sum(1 for d in days if d.worked_minutes > 0),
            days_incomplete=sum(1 for d in days if not d.complete),
        )

    def list_range(
        self,
        start: date,
        end: date,
        *,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> Sequence[TimeEntry]:
        if end < start:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")
        return self._entries.list_range(
            start=day_bounds(start)[0],
            end=day_bounds(end)[1],
            employee_id=employee_id,
            department=department,
        )

    def replace_day(self, employee_id: int, day: date, punches: Sequence[NewPunch]) -> int:
        start, end = day_bounds(day)
        for p in punches:
            if not start <= p.punched_at < end:
                raise ValidationError("Todos los fichajes deben pertenecer al mismo día")
        return self._entries.replace_day(int(employee_id), day, punches)

    def delete(self, entry_id: int) -> None:
        if not self._entries.delete(int(entry_id)):
            raise NotFoundError("Fichaje no encontrado")

    def get(self, entry_id: int) -> TimeEntry:
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Fichaje no encontrado")
        return entry

