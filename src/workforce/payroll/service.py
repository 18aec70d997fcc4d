from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_minutes
from ..core.enums import RequestStatus, TimeEntryType
from ..core.exceptions import ValidationError
from ..overtime.service import OvertimeService
from ..time_entries.model import TimeEntry
from ..time_entries.service import TimeEntryService
from .model import ReportData


def _hhmm(value) -> str:
    return value.strftime("%H:%M") if value else "-"


class PayrollReportService:
    def __init__(self, time_entries: TimeEntryService, overtime: OvertimeService):
        self._time_entries = time_entries
        self._overtime = overtime

    def build_hours_report(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")

        entries = self._time_entries.list_range(start, end, employee_id=employee_id, department=department)
        calculator = self._time_entries.calculator

        by_day: dict[tuple[int, date], list[TimeEntry]] = defaultdict(list)
        for e in entries:
            by_day[(e.employee_id, e.punched_at.date())].append(e)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for (emp_id, work_date), day_entries in sorted(by_day.items(), key=lambda kv: (kv[0][1], kv[0][0])):
            day_entries.sort(key=lambda x: x.punched_at)
            totals = calculator.day_totals(day_entries)
            first = day_entries[0]
            ins = [e.punched_at for e in day_entries if e.entry_type == TimeEntryType.IN]
            outs = [e.punched_at for e in day_entries if e.entry_type == TimeEntryType.OUT]

            out_rows.append(
                {
                    "employee_id": emp_id,
                    "full_name": first.employee_name or "-",
                    "department": first.department or "-",
                    "work_date": work_date.strftime("%Y-%m-%d"),
                    "check_in": _hhmm(ins[0] if ins else None),
                    "check_out": _hhmm(outs[-1] if outs else None),
                    "lunch": format_minutes(totals.lunch_minutes),
                    "worked_hours": format_minutes(totals.worked_minutes),
                    "complete": totals.complete,
                }
            )

            s = summary_map.get(emp_id)
            if not s:
                s = {
                    "employee_id": emp_id,
                    "full_name": first.employee_name or "-",
                    "department": first.department or "-",
                    "total_minutes": 0,
                    "overtime_hours": 0.0,
                    "overtime_amount": 0.0,
                }
                summary_map[emp_id] = s
            s["total_minutes"] += totals.worked_minutes

        # approved overtime in the period, also for employees without punches
        for ot in self._overtime.list_range(start=start, end=end, employee_id=employee_id, status=RequestStatus.APPROVED):
            s = summary_map.get(ot.employee_id)
            if not s:
                if department:
                    continue
                s = {
                    "employee_id": ot.employee_id,
                    "full_name": ot.employee_name or "-",
                    "department": "-",
                    "total_minutes": 0,
                    "overtime_hours": 0.0,
                    "overtime_amount": 0.0,
                }
                summary_map[ot.employee_id] = s
            s["overtime_hours"] += ot.hours
            s["overtime_amount"] += ot.total

        summary = []
        for s in sorted(summary_map.values(), key=lambda x: x["total_minutes"], reverse=True):
            total_minutes = int(s["total_minutes"])
            summary.append(
                {
                    "employee_id": s["employee_id"],
                    "full_name": s["full_name"],
                    "department": s["department"],
                    "total_minutes": total_minutes,
                    "total_hours": format_minutes(total_minutes),
                    "overtime_hours": round(s["overtime_hours"], 2),
                    "overtime_amount": round(s["overtime_amount"], 2),
                }
            )

        return ReportData(rows=out_rows, summary=summary)
