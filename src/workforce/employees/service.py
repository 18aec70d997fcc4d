from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.validators import normalize_dni, optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, DEFAULT_VACATION_DAYS
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .company_model import DEFAULT_ALLOWED_RADIUS, Company
from .company_repository import CompanyRepository
from .model import Employee, EmployeeData
from .repository import EmployeeRepository


def _optional_int(value, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")


def _optional_float(value, field_name: str) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")


def employee_data_from_payload(body: dict) -> EmployeeData:
    """Build an ``EmployeeData`` from a JSON body (dates as YYYY-MM-DD)."""

    quota = _optional_int(body.get("vacation_days_total"), "Días de vacaciones")
    return EmployeeData(
        dni=str(body.get("dni") or ""),
        first_name=str(body.get("first_name") or ""),
        last_name=str(body.get("last_name") or ""),
        company_id=_optional_int(body.get("company_id"), "Empresa"),
        email=optional_text(body.get("email")),
        job_title=optional_text(body.get("job_title")),
        department=optional_text(body.get("department")),
        category=optional_text(body.get("category")),
        birth_date=parse_optional_date(body.get("birth_date"), "Fecha de nacimiento"),
        hire_date=parse_optional_date(body.get("hire_date"), "Fecha de alta"),
        manager_id=_optional_int(body.get("manager_id"), "Responsable"),
        vacation_days_total=quota,
    )


class EmployeeService:
    def __init__(
        self,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        *,
        default_vacation_days: int = DEFAULT_VACATION_DAYS,
    ):
        self._employees = employees
        self._companies = companies
        self._default_vacation_days = int(default_vacation_days)

    def _validate(self, data: EmployeeData, *, current_quota: int) -> EmployeeData:
        first_name = require_non_empty(data.first_name, "Nombre")
        last_name = require_non_empty(data.last_name, "Apellidos")
        dni = normalize_dni(data.dni)
        quota = current_quota if data.vacation_days_total is None else int(data.vacation_days_total)
        if quota < 0:
            raise ValidationError("Los días de vacaciones no pueden ser negativos")
        if data.company_id is not None and not self._companies.get_by_id(data.company_id):
            raise NotFoundError("Empresa no encontrada")
        return replace(
            data,
            dni=dni,
            first_name=first_name,
            last_name=last_name,
            category=data.category.strip().upper() if data.category else None,
            vacation_days_total=quota,
        )

    def create(self, data: EmployeeData) -> int:
        data = self._validate(data, current_quota=self._default_vacation_days)
        if self._employees.get_by_dni(data.dni):
            raise ConflictError("Ya existe un empleado con ese DNI")
        return self._employees.create(data)

    def update(self, employee_id: int, data: EmployeeData) -> None:
        current = self.get(employee_id)
        data = self._validate(data, current_quota=current.vacation_days_total)

        other = self._employees.get_by_dni(data.dni)
        if other and other.employee_id != current.employee_id:
            raise ConflictError("Ya existe un empleado con ese DNI")
        if data.manager_id is not None and int(data.manager_id) == current.employee_id:
            raise ValidationError("Un empleado no puede ser su propio responsable")

        if not self._employees.update(current.employee_id, data):
            raise ValidationError("No se pudo actualizar el empleado")

    def get(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")
        return emp

    def find_by_dni(self, dni: str) -> Optional[Employee]:
        return self._employees.get_by_dni(normalize_dni(dni))

    def list(
        self,
        *,
        search: Optional[str] = None,
        company_id: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> Sequence[Employee]:
        return self._employees.list(
            search=optional_text(search),
            company_id=company_id,
            active=active,
            limit=DEFAULT_LIST_LIMIT,
        )

    def list_companies(self) -> Sequence[Company]:
        return self._companies.list_all()

    def create_company(
        self,
        *,
        name: str,
        cif: Optional[str],
        office_latitude=None,
        office_longitude=None,
        allowed_radius=None,
    ) -> int:
        name = require_non_empty(name, "Nombre de la empresa")
        cif = optional_text(cif)
        latitude = _optional_float(office_latitude, "Latitud")
        longitude = _optional_float(office_longitude, "Longitud")
        if (latitude is None) != (longitude is None):
            raise ValidationError("Indica latitud y longitud de la oficina")
        if latitude is not None and not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValidationError("Coordenadas de la oficina fuera de rango")
        radius = _optional_int(allowed_radius, "Radio permitido")
        if radius is not None and radius <= 0:
            raise ValidationError("El radio permitido debe ser mayor que cero")
        return self._companies.create(
            name=name,
            cif=cif.upper() if cif else None,
            office_latitude=latitude,
            office_longitude=longitude,
            allowed_radius=DEFAULT_ALLOWED_RADIUS if radius is None else radius,
        )
