from __future__ import annotations

import io
from datetime import date, datetime, time

import pytest
from openpyxl import Workbook

from tests.fakes import make_employee
from workforce.common.spreadsheet import parse_excel_date
from workforce.core.enums import RequestStatus, TimeEntryType
from workforce.core.exceptions import ValidationError
from workforce.overtime.importer import parse_clock_time, parse_duration_hours


def _setup(container, repos):
    repos.employees.add(make_employee(1, dni="12345678Z", category="COCINERO"))
    container.overtime_service.upsert_rate(category="cocinero", overtime_rate=15, holiday_overtime_rate=20)


def test_cell_parsers():
    assert parse_excel_date(45728) == date(2025, 3, 12)
    assert parse_excel_date("12/03/2025") == date(2025, 3, 12)
    assert parse_excel_date(datetime(2025, 3, 12, 0, 0)) == date(2025, 3, 12)
    with pytest.raises(ValidationError):
        parse_excel_date("mañana")

    assert parse_duration_hours(0.5) == 12
    assert parse_duration_hours("01:30") == 1.5
    assert parse_duration_hours("2,25") == 2.25
    assert parse_duration_hours(None) == 0

    assert parse_clock_time(date(2025, 3, 12), "08:05") == datetime(2025, 3, 12, 8, 5)
    assert parse_clock_time(date(2025, 3, 12), time(17, 0, 30)) == datetime(2025, 3, 12, 17, 0)
    assert parse_clock_time(date(2025, 3, 12), 0.75) == datetime(2025, 3, 12, 18, 0)
    assert parse_clock_time(date(2025, 3, 12), "") is None


def test_import_rows_creates_punches_and_overtime(container, repos):
    _setup(container, repos)

    result = container.overtime_importer.import_rows(
        [
            {
                "DNI": "12345678-z",
                "Nombre": "Ana",
                "Fecha": "12/03/2025",
                "Entrada1": "08:00",
                "Salida1": "13:00",
                "Entrada2": "14:00",
                "Salida2": "18:00",
                "Extr": "02:00",
            },
            # Saturday: holiday rate
            {"DNI": "12345678Z", "Fecha": "15/03/2025", "Entrada1": "09:00", "Salida1": "12:00", "Extr": "01:30"},
        ]
    )

    assert result.imported == 2
    assert result.errors == []
    punches = repos.time_entries.list_range(start=datetime(2025, 3, 12), end=datetime(2025, 3, 13), employee_id=1)
    assert [p.entry_type for p in punches] == [
        TimeEntryType.IN,
        TimeEntryType.LUNCH_START,
        TimeEntryType.LUNCH_END,
        TimeEntryType.OUT,
    ]

    weekday, saturday = sorted(repos.overtime.list_for_employee(1), key=lambda o: o.work_date)
    assert (weekday.hours, weekday.rate, weekday.total) == (2.0, 15, 30.0)
    assert (saturday.hours, saturday.rate, saturday.total) == (1.5, 20, 30.0)
    assert weekday.status == RequestStatus.PENDING


def test_import_reimport_replaces_day_punches(container, repos):
    _setup(container, repos)
    row = {"DNI": "12345678Z", "Fecha": "12/03/2025", "Entrada1": "08:00", "Salida1": "16:00", "Extr": "01:00"}

    container.overtime_importer.import_rows([row])
    container.overtime_importer.import_rows([row])

    punches = repos.time_entries.list_range(start=datetime(2025, 3, 12), end=datetime(2025, 3, 13), employee_id=1)
    assert len(punches) == 2


def test_import_reports_unknown_and_skipped_rows(container, repos):
    _setup(container, repos)

    result = container.overtime_importer.import_rows(
        [
            {"DNI": "99999999R", "Nombre": "Desconocido", "Fecha": "12/03/2025", "Extr": "01:00"},
            {"DNI": "", "Fecha": "12/03/2025"},
            {"DNI": "12345678Z", "Fecha": "no es fecha", "Extr": "01:00"},
        ]
    )

    assert result.imported == 0
    assert result.errors[0] == "Fila 1: Empleado Desconocido no encontrado en BD"
    assert result.skipped == ["Fila 2: Sin datos válidos (DNI: vacío)"]
    assert result.errors[1].startswith("Fila 3 (DNI 12345678Z)")


def test_import_without_rate_records_zero_amount(container, repos):
    repos.employees.add(make_employee(1, dni="12345678Z", category="SIN_TARIFA"))

    container.overtime_importer.import_rows([{"DNI": "12345678Z", "Fecha": "12/03/2025", "Extr": "03:00"}])

    [entry] = repos.overtime.list_for_employee(1)
    assert (entry.hours, entry.rate, entry.total) == (3.0, 0.0, 0.0)


def test_rows_without_overtime_are_skipped_before_touching_punches(container, repos):
    _setup(container, repos)

    result = container.overtime_importer.import_rows(
        [
            {"DNI": "12345678Z", "Fecha": "12/03/2025", "Entrada1": "08:00", "Salida1": "16:00", "Extr": "0:00"},
            {"DNI": "12345678Z", "Fecha": "13/03/2025", "Entrada1": "08:00", "Salida1": "16:00"},
        ]
    )

    assert result.imported == 0
    assert result.skipped == ["Fila 1: Horas inválidas (0:00)", "Fila 2: Horas inválidas ()"]
    assert repos.time_entries.list_range(start=datetime(2025, 3, 12), end=datetime(2025, 3, 14), employee_id=1) == []
    assert repos.overtime.list_for_employee(1) == []


def test_amount_uses_unrounded_hours(container, repos):
    _setup(container, repos)

    container.overtime_importer.import_rows([{"DNI": "12345678Z", "Fecha": "12/03/2025", "Extr": "0:20"}])

    [entry] = repos.overtime.list_for_employee(1)
    assert (entry.hours, entry.rate, entry.total) == (0.33, 15, 5.0)


def test_import_workbook_reads_native_cells(container, repos):
    _setup(container, repos)
    wb = Workbook()
    ws = wb.active
    ws.append(["DNI", "Nombre", "Fecha", "Entrada1", "Salida1", "Extr"])
    ws.append(["12345678Z", "Ana", datetime(2025, 3, 12), time(8, 0), time(16, 0), time(0, 20)])
    ws.append(["12345678Z", "Ana", datetime(2025, 3, 13), time(8, 0), time(16, 0), None])
    buf = io.BytesIO()
    wb.save(buf)

    result = container.overtime_importer.import_workbook(buf.getvalue())

    assert result.imported == 1
    assert result.skipped == ["Fila 2: Horas inválidas ()"]
    punches = repos.time_entries.list_range(start=datetime(2025, 3, 12), end=datetime(2025, 3, 13), employee_id=1)
    assert [(p.entry_type, p.punched_at) for p in punches] == [
        (TimeEntryType.IN, datetime(2025, 3, 12, 8, 0)),
        (TimeEntryType.OUT, datetime(2025, 3, 12, 16, 0)),
    ]
    [entry] = repos.overtime.list_for_employee(1)
    assert (entry.work_date, entry.hours, entry.total) == (date(2025, 3, 12), 0.33, 5.0)
