"""Hours report exports: CSV for spreadsheets that open UTF-8 with BOM, XLSX with two sheets."""

from __future__ import annotations

import csv
import io

import pandas as pd

from .model import ReportData

ROW_FIELDS = [
    "work_date",
    "employee_id",
    "full_name",
    "department",
    "check_in",
    "check_out",
    "lunch",
    "worked_hours",
    "complete",
]

SUMMARY_FIELDS = [
    "employee_id",
    "full_name",
    "department",
    "total_hours",
    "overtime_hours",
    "overtime_amount",
]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def report_csv(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=ROW_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def report_xlsx(data: ReportData) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(data.rows, columns=ROW_FIELDS).to_excel(writer, index=False, sheet_name="Fichajes")
        pd.DataFrame(data.summary, columns=SUMMARY_FIELDS).to_excel(writer, index=False, sheet_name="Resumen")
    return output.getvalue()
