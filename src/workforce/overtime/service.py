from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import parse_enum, require_non_empty, require_positive
from ..core.enums import RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import CategoryRate, OvertimeEntry
from .repository import CategoryRateRepository, OvertimeRepository


def overtime_total(hours: float, rate: float) -> float:
    return round(float(hours) * float(rate), 2)


def _non_negative(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")
    if number < 0:
        raise ValidationError(f"{field_name} no puede ser negativo")
    return number


class OvertimeService:
    def __init__(self, overtime: OvertimeRepository, rates: CategoryRateRepository, employees: EmployeeRepository):
        self._overtime = overtime
        self._rates = rates
        self._employees = employees

    def list_rates(self) -> Sequence[CategoryRate]:
        return self._rates.list_all()

    def rates_by_category(self) -> dict[str, CategoryRate]:
        return {r.category.upper(): r for r in self._rates.list_all()}

    def upsert_rate(self, *, category: str, overtime_rate, holiday_overtime_rate) -> CategoryRate:
        rate = CategoryRate(
            category=require_non_empty(category, "Categoría").upper(),
            overtime_rate=_non_negative(overtime_rate, "Tarifa"),
            holiday_overtime_rate=_non_negative(holiday_overtime_rate, "Tarifa festiva"),
        )
        self._rates.upsert(rate)
        return rate

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeEntry]:
        return self._overtime.list_for_employee(int(employee_id))

    def create(self, *, employee_id: int, hours, rate, work_date: date) -> int:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Empleado no encontrado")
        hours = require_positive(hours, "Horas")
        rate = _non_negative(rate, "Tarifa")
        return self._overtime.create(
            employee_id=int(employee_id),
            work_date=work_date,
            hours=round(hours, 2),
            rate=rate,
            total=overtime_total(hours, rate),
        )

    def update_status(self, overtime_id: int, status) -> None:
        status = parse_enum(RequestStatus, status, "Estado")
        if not self._overtime.get_by_id(int(overtime_id)):
            raise NotFoundError("Registro de horas extras no encontrado")
        self._overtime.update_status(int(overtime_id), status)

    def delete(self, overtime_id: int) -> None:
        if not self._overtime.delete(int(overtime_id)):
            raise NotFoundError("Registro de horas extras no encontrado")

    def list_range(
        self, *, start: date, end: date, employee_id: Optional[int] = None, status: Optional[RequestStatus] = None
    ) -> Sequence[OvertimeEntry]:
        return self._overtime.list_range(start=start, end=end, employee_id=employee_id, status=status)
