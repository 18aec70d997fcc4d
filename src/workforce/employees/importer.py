"""Bulk load of employee records from the HR workbook.

One row per employee, matched by DNI: unknown DNIs are created, known ones
updated. Blank cells keep the current value of an existing employee.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from ..common.logging_config import get_logger
from ..common.spreadsheet import cell_text, column, parse_optional_excel_date, read_rows
from ..core.exceptions import DomainError, ValidationError
from .model import Employee, EmployeeData, EmployeeImportResult
from .service import EmployeeService

log = get_logger("employees.import")

FIRST_NAME_COLUMNS = ("Nombre", "Empleado", "Name")
LAST_NAME_COLUMNS = ("Apellido", "Apellidos", "Last Name")
DNI_COLUMNS = ("DNI", "NIF", "Identificación")
EXAMPLE_MARKER = "EJEMPLO"


def _text(row: Mapping[str, Any], *names: str) -> Optional[str]:
    return cell_text(column(row, *names)) or None


def _int(row: Mapping[str, Any], *names: str) -> Optional[int]:
    raw = _text(row, *names)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{names[0]} no es un número válido ({raw})")


def row_to_employee_data(row: Mapping[str, Any], current: Optional[Employee] = None) -> EmployeeData:
    values = dict(
        first_name=_text(row, *FIRST_NAME_COLUMNS),
        last_name=_text(row, *LAST_NAME_COLUMNS),
        email=_text(row, "Email"),
        job_title=_text(row, "Puesto"),
        department=_text(row, "Departamento"),
        category=_text(row, "Categoría", "Categoria"),
        birth_date=parse_optional_excel_date(column(row, "Fecha Nacimiento")),
        hire_date=parse_optional_excel_date(column(row, "Fecha Entrada", "Fecha Alta")),
        company_id=_int(row, "Empresa (ID)"),
        manager_id=_int(row, "ID Responsable"),
        vacation_days_total=_int(row, "Días Vacaciones", "Dias Vacaciones"),
    )
    dni = _text(row, *DNI_COLUMNS) or ""

    if current is None:
        return EmployeeData(
            dni=dni,
            first_name=values.pop("first_name") or "",
            last_name=values.pop("last_name") or "",
            **values,
        )

    base = EmployeeData(
        dni=current.dni,
        first_name=current.first_name,
        last_name=current.last_name,
        company_id=current.company_id,
        email=current.email,
        job_title=current.job_title,
        department=current.department,
        category=current.category,
        birth_date=current.birth_date,
        hire_date=current.hire_date,
        manager_id=current.manager_id,
        vacation_days_total=current.vacation_days_total,
    )
    return replace(base, **{k: v for k, v in values.items() if v is not None})


class EmployeeImporter:
    def __init__(self, employees: EmployeeService):
        self._employees = employees

    def import_workbook(self, data: bytes) -> EmployeeImportResult:
        if not data:
            raise ValidationError("No se ha subido ningún archivo")
        return self.import_rows(read_rows(data))

    def import_rows(self, rows: Iterable[Mapping[str, Any]]) -> EmployeeImportResult:
        created = updated = 0
        errors: list[str] = []

        for row in rows:
            dni = _text(row, *DNI_COLUMNS)
            first_name = _text(row, *FIRST_NAME_COLUMNS)
            last_name = _text(row, *LAST_NAME_COLUMNS)
            if not dni or not (first_name or last_name):
                continue
            if EXAMPLE_MARKER in dni.upper() or EXAMPLE_MARKER in (first_name or "").upper():
                continue

            try:
                current = self._employees.find_by_dni(dni)
                data = row_to_employee_data(row, current)
                if current:
                    self._employees.update(current.employee_id, data)
                    updated += 1
                else:
                    self._employees.create(data)
                    created += 1
            except DomainError as exc:
                errors.append(f"Error importando {dni}: {exc}")
                log.warning("Employee row %s rejected: %s", dni, exc)

        log.info("Employee import summary: created=%s updated=%s errors=%s", created, updated, len(errors))
        return EmployeeImportResult(created=created, updated=updated, errors=errors)
