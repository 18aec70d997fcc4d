"""Excel import of daily presence + overtime sheets.

The first sheet is read with pandas. Each row is one employee-day: ``DNI``,
``Nombre``, ``Fecha``, punch columns (``Entrada1``/``Salida1``/``Entrada2``/
``Salida2``), ``Pausa``, ``Pres`` (presence hours) and ``Extr`` (overtime).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Mapping, Optional

from ..common.logging_config import get_logger
from ..common.spreadsheet import cell_text, column, is_blank, is_number, parse_excel_date, read_rows
from ..core.constants import IMPORT_DEVICE, IMPORT_LOCATION
from ..core.enums import TimeEntryType
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.calendar import HolidayCalendar
from ..time_entries.model import NewPunch
from ..time_entries.service import TimeEntryService
from .model import ImportResult
from .repository import OvertimeRepository
from .service import OvertimeService, overtime_total

log = get_logger("overtime.import")

FIRST_IN_COLUMNS = ("Entrada1", "Entrada", "Entrada_1")
FIRST_OUT_COLUMNS = ("Salida1", "Salida", "Salida_1")
SECOND_IN_COLUMNS = ("Entrada2", "Entrada_2")
SECOND_OUT_COLUMNS = ("Salida2", "Salida_", "Salida_2")


def _hours_from_text(raw: str) -> float:
    hh, _, mm = raw.strip().partition(":")
    try:
        return int(hh or 0) + int((mm or "0")[:2]) / 60
    except ValueError:
        raise ValidationError(f"Duración inválida ({raw})")


def parse_duration_hours(value: Any) -> float:
    """Duration cell as hours: fraction of day, ``HH:MM`` text, time or timedelta."""

    if is_blank(value):
        return 0.0
    if isinstance(value, timedelta):
        return value.total_seconds() / 3600
    if isinstance(value, time):
        return value.hour + value.minute / 60 + value.second / 3600
    if is_number(value):
        # spreadsheets store durations as a fraction of a day (0.5 = 12h)
        return float(value) * 24
    if isinstance(value, str):
        raw = value.strip()
        if ":" in raw:
            return _hours_from_text(raw)
        try:
            return float(raw.replace(",", "."))
        except ValueError:
            raise ValidationError(f"Duración inválida ({value})")
    raise ValidationError(f"Duración inválida ({value})")


def parse_clock_time(day: date, value: Any) -> Optional[datetime]:
    """Time-of-day cell anchored on ``day``; None when blank or unreadable."""

    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return datetime.combine(day, value.time().replace(second=0, microsecond=0))
    if isinstance(value, time):
        return datetime.combine(day, value.replace(second=0, microsecond=0))
    if is_number(value):
        fraction = float(value) % 1
        minutes = int(round(fraction * 24 * 60)) % (24 * 60)
        return datetime.combine(day, time(minutes // 60, minutes % 60))
    if isinstance(value, str) and ":" in value:
        hh, _, rest = value.strip().partition(":")
        try:
            return datetime.combine(day, time(int(hh), int(rest[:2])))
        except ValueError:
            return None
    return None


class OvertimeImporter:
    def __init__(
        self,
        employees: EmployeeRepository,
        overtime: OvertimeRepository,
        overtime_service: OvertimeService,
        time_entries: TimeEntryService,
        calendar: HolidayCalendar,
    ):
        self._employees = employees
        self._overtime = overtime
        self._overtime_service = overtime_service
        self._time_entries = time_entries
        self._calendar = calendar

    def import_workbook(self, data: bytes) -> ImportResult:
        if not data:
            raise ValidationError("No se ha subido ningún archivo")
        rows = read_rows(data)
        if rows:
            log.debug("Excel columns found: %s", list(rows[0].keys()))
        return self.import_rows(rows)

    def import_rows(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        rates = self._overtime_service.rates_by_category()
        imported = 0
        errors: list[str] = []
        skipped: list[str] = []

        for index, row in enumerate(rows, start=1):
            dni = cell_text(column(row, "DNI")).replace(" ", "").replace("-", "").upper()
            raw_date = column(row, "Fecha")
            if not dni or is_blank(raw_date):
                skipped.append(f"Fila {index}: Sin datos válidos (DNI: {dni or 'vacío'})")
                continue

            employee = self._employees.get_by_dni(dni)
            if not employee:
                name = cell_text(column(row, "Nombre")) or dni
                errors.append(f"Fila {index}: Empleado {name} no encontrado en BD")
                log.warning("Row %s: DNI %s not found", index, dni)
                continue

            raw_hours = column(row, "Extr")
            try:
                hours = parse_duration_hours(raw_hours)
            except ValidationError:
                hours = 0.0
            if hours <= 0:
                skipped.append(f"Fila {index}: Horas inválidas ({cell_text(raw_hours)})")
                continue

            try:
                self._import_row(row, employee, raw_date, hours, rates)
                imported += 1
            except Exception as exc:
                errors.append(f"Fila {index} (DNI {dni}): {exc}")
                log.error("Row %s (DNI %s) failed: %s", index, dni, exc)

        log.info("Overtime import summary: imported=%s errors=%s skipped=%s", imported, len(errors), len(skipped))
        return ImportResult(
            message=f"Importación completada. {imported} registros añadidos.",
            imported=imported,
            errors=errors,
            skipped=skipped,
        )

    def _import_row(
        self, row: Mapping[str, Any], employee: Employee, raw_date: Any, hours: float, rates: dict
    ) -> None:
        dni = employee.dni
        day = parse_excel_date(raw_date)

        first_in = column(row, *FIRST_IN_COLUMNS)
        first_out = column(row, *FIRST_OUT_COLUMNS)
        second_in = column(row, *SECOND_IN_COLUMNS)
        second_out = column(row, *SECOND_OUT_COLUMNS)
        pause = column(row, "Pausa")
        presence = column(row, "Pres")

        if first_in is not None or first_out is not None or presence is not None:
            check_in = parse_clock_time(day, first_in)
            check_out = parse_clock_time(day, second_out if second_out is not None else first_out)
            lunch_start = parse_clock_time(day, first_out)
            lunch_end = parse_clock_time(day, second_in)

            worked_hours = self._worked_hours(check_in, check_out, lunch_start, lunch_end, pause, presence)
            log.debug("DNI %s %s: %.2f h worked", dni, day.isoformat(), worked_hours)

            punches: list[NewPunch] = []
            if check_in:
                punches.append(self._punch(TimeEntryType.IN, check_in))
            if second_in is not None and lunch_start and lunch_end:
                punches.append(self._punch(TimeEntryType.LUNCH_START, lunch_start))
                punches.append(self._punch(TimeEntryType.LUNCH_END, lunch_end))
            if check_out:
                punches.append(self._punch(TimeEntryType.OUT, check_out))
            self._time_entries.replace_day(employee.employee_id, day, punches)

        rate_info = rates.get((employee.category or "").upper())
        if rate_info is None:
            rate = 0.0
        elif self._calendar.is_premium_day(day):
            rate = rate_info.holiday_overtime_rate
        else:
            rate = rate_info.overtime_rate
        # the amount uses the unrounded hours
        self._overtime.create(
            employee_id=employee.employee_id,
            work_date=day,
            hours=round(hours, 2),
            rate=rate,
            total=overtime_total(hours, rate),
        )

    @staticmethod
    def _worked_hours(
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        lunch_start: Optional[datetime],
        lunch_end: Optional[datetime],
        pause: Any,
        presence: Any,
    ) -> float:
        if presence is not None:
            return parse_duration_hours(presence)
        if not (check_in and check_out):
            return 0.0

        gross = (check_out - check_in).total_seconds() / 3600
        if pause is not None:
            lunch = parse_duration_hours(pause)
        elif lunch_start and lunch_end:
            lunch = (lunch_end - lunch_start).total_seconds() / 3600
        else:
            lunch = 0.0
        return max(0.0, gross - lunch)

    @staticmethod
    def _punch(entry_type: TimeEntryType, at: datetime) -> NewPunch:
        return NewPunch(entry_type=entry_type, punched_at=at, location=IMPORT_LOCATION, device=IMPORT_DEVICE)
