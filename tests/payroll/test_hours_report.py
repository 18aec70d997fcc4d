from __future__ import annotations

import csv
import io
from datetime import date, datetime

import pandas as pd
import pytest

from tests.fakes import make_employee
from workforce.core.enums import RequestStatus, TimeEntryType
from workforce.core.exceptions import ValidationError
from workforce.payroll.export import ROW_FIELDS, SUMMARY_FIELDS, report_csv, report_xlsx


def _punch(repos, employee_id, kind, day, hh, mm=0):
    repos.time_entries.create(
        employee_id=employee_id,
        entry_type=kind,
        punched_at=datetime(day.year, day.month, day.day, hh, mm),
        location=None,
        device=None,
    )


def _seed(repos):
    repos.employees.add(make_employee(1, first_name="Ana", last_name="López", department="Cocina"))
    repos.employees.add(make_employee(2, first_name="Luis", last_name="Pons", department="Sala"))
    repos.employees.add(make_employee(3, first_name="Marta", last_name="Ruiz", department="Sala"))
    d1, d2 = date(2025, 3, 10), date(2025, 3, 11)
    _punch(repos, 1, TimeEntryType.IN, d1, 8)
    _punch(repos, 1, TimeEntryType.LUNCH_START, d1, 13)
    _punch(repos, 1, TimeEntryType.LUNCH_END, d1, 14)
    _punch(repos, 1, TimeEntryType.OUT, d1, 17)
    _punch(repos, 2, TimeEntryType.IN, d1, 9)
    _punch(repos, 2, TimeEntryType.OUT, d1, 19, 30)
    _punch(repos, 2, TimeEntryType.IN, d2, 9)
    repos.overtime.create(
        employee_id=3, work_date=d2, hours=2, rate=15, total=30, status=RequestStatus.APPROVED
    )
    repos.overtime.create(employee_id=1, work_date=d1, hours=1, rate=15, total=15, status=RequestStatus.PENDING)


def test_report_rows_and_summary(container, repos):
    _seed(repos)

    data = container.payroll_report_service.build_hours_report(start=date(2025, 3, 1), end=date(2025, 3, 31))

    assert [(r["employee_id"], r["work_date"]) for r in data.rows] == [
        (1, "2025-03-10"),
        (2, "2025-03-10"),
        (2, "2025-03-11"),
    ]
    first = data.rows[0]
    assert (first["check_in"], first["check_out"], first["lunch"], first["worked_hours"]) == ("08:00", "17:00", "01:00", "08:00")
    assert data.rows[2]["complete"] is False
    assert data.rows[2]["check_out"] == "-"

    assert [s["employee_id"] for s in data.summary] == [2, 1, 3]
    luis, ana, marta = data.summary
    assert luis["total_hours"] == "10:30"
    assert ana["overtime_hours"] == 0.0
    assert (marta["total_minutes"], marta["overtime_hours"], marta["overtime_amount"]) == (0, 2.0, 30.0)


def test_department_filter_drops_unpunched_overtime(container, repos):
    _seed(repos)

    data = container.payroll_report_service.build_hours_report(
        start=date(2025, 3, 1), end=date(2025, 3, 31), department="Sala"
    )

    assert {s["employee_id"] for s in data.summary} == {2}


def test_report_range_must_be_ordered(container):
    with pytest.raises(ValidationError):
        container.payroll_report_service.build_hours_report(start=date(2025, 3, 2), end=date(2025, 3, 1))


def test_exports(container, repos):
    _seed(repos)
    data = container.payroll_report_service.build_hours_report(start=date(2025, 3, 1), end=date(2025, 3, 31))

    raw = report_csv(data)
    assert raw.startswith(b"\xef\xbb\xbf")
    reader = csv.DictReader(io.StringIO(raw.decode("utf-8-sig")))
    assert reader.fieldnames == list(ROW_FIELDS)
    assert len(list(reader)) == 3

    sheets = pd.read_excel(io.BytesIO(report_xlsx(data)), sheet_name=None)
    assert set(sheets) == {"Fichajes", "Resumen"}
    assert list(sheets["Resumen"].columns) == list(SUMMARY_FIELDS)
    assert len(sheets["Resumen"]) == 3
