from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..anomalies.service import AnomalyService
from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text
from ..core.enums import RequestStatus, Role, VacationType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..holidays.calendar import HolidayCalendar
from .model import Vacation, VacationBalance
from .repository import VacationRepository

log = get_logger("vacations")

_HR_ROLES = {Role.ADMIN, Role.HR}


class VacationService:
    def __init__(
        self,
        vacations: VacationRepository,
        employees: EmployeeRepository,
        calendar: HolidayCalendar,
        *,
        anomalies: Optional[AnomalyService] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._vacations = vacations
        self._employees = employees
        self._calendar = calendar
        self._anomalies = anomalies
        self._clock = clock

    def balance(self, employee_id: int, year: int) -> VacationBalance:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")

        used = self._vacations.sum_days(
            employee_id=emp.employee_id, year=int(year), vacation_type=VacationType.VACATION, status=RequestStatus.APPROVED
        )
        pending = self._vacations.sum_days(
            employee_id=emp.employee_id, year=int(year), vacation_type=VacationType.VACATION, status=RequestStatus.PENDING
        )
        total = int(emp.vacation_days_total)
        return VacationBalance(
            employee_id=emp.employee_id,
            year=int(year),
            total=total,
            used=used,
            pending=pending,
            available=total - used - pending,
        )

    def create(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        current_employee_id: Optional[int],
        employee_id: int,
        start_date: date,
        end_date: date,
        vacation_type: VacationType,
        reason: Optional[str] = None,
    ) -> int:
        if current_role not in _HR_ROLES and (current_employee_id is None or int(employee_id) != int(current_employee_id)):
            raise AuthorizationError("Solo puedes solicitar ausencias para ti mismo")

        if end_date < start_date:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")

        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")

        if self._vacations.find_overlapping(employee_id=emp.employee_id, start_date=start_date, end_date=end_date):
            raise ConflictError("Ya existe una ausencia en esas fechas")

        days = self._calendar.business_days_count(start_date, end_date)

        if vacation_type == VacationType.VACATION:
            available = self.balance(emp.employee_id, start_date.year).available
            if days > available:
                raise ValidationError(
                    f"No hay días suficientes: disponibles {available}, solicitados {days}"
                )

        if current_role in _HR_ROLES:
            status, decided_by, decided_at = RequestStatus.APPROVED, int(current_user_id), self._clock()
        else:
            status, decided_by, decided_at = RequestStatus.PENDING, None, None

        vacation_id = self._vacations.create(
            employee_id=emp.employee_id,
            start_date=start_date,
            end_date=end_date,
            vacation_type=vacation_type,
            status=status,
            business_days=days,
            reason=optional_text(reason),
            decided_by=decided_by,
            decided_at=decided_at,
        )
        log.info("Absence %s created for employee %s (%s, %s days)", vacation_id, emp.employee_id, status.value, days)
        if self._anomalies is not None:
            try:
                self._anomalies.detect_vacation(self._vacations.get_by_id(vacation_id))
            except Exception:
                log.exception("Anomaly detection failed for absence %s", vacation_id)
        return vacation_id

    def _decide(self, *, current_role: Role, user_id: int, vacation_id: int, status: RequestStatus) -> None:
        if current_role not in _HR_ROLES:
            raise AuthorizationError("No tienes permisos")

        vac = self._vacations.get_by_id(int(vacation_id))
        if not vac:
            raise NotFoundError("Solicitud no encontrada")
        if vac.status != RequestStatus.PENDING:
            raise ValidationError("La solicitud ya ha sido procesada")

        if not self._vacations.decide(
            vacation_id=vac.vacation_id, status=status, decided_by=int(user_id), decided_at=self._clock()
        ):
            raise ValidationError("La solicitud ya ha sido procesada")

    def approve(self, *, current_role: Role, user_id: int, vacation_id: int) -> None:
        self._decide(current_role=current_role, user_id=user_id, vacation_id=vacation_id, status=RequestStatus.APPROVED)

    def reject(self, *, current_role: Role, user_id: int, vacation_id: int) -> None:
        self._decide(current_role=current_role, user_id=user_id, vacation_id=vacation_id, status=RequestStatus.REJECTED)

    def delete(self, *, current_role: Role, current_employee_id: Optional[int], vacation_id: int) -> None:
        vac = self._vacations.get_by_id(int(vacation_id))
        if not vac:
            raise NotFoundError("Solicitud no encontrada")

        if current_role not in _HR_ROLES:
            if current_employee_id is None or vac.employee_id != int(current_employee_id):
                raise AuthorizationError("No tienes permisos")
            if vac.status != RequestStatus.PENDING:
                raise ValidationError("Solo puedes cancelar solicitudes pendientes")

        if not self._vacations.delete(vac.vacation_id):
            raise ValidationError("No se pudo eliminar la solicitud")

    def list_all(self, *, status: Optional[RequestStatus] = None) -> Sequence[Vacation]:
        return self._vacations.list(status=status)

    def list_for_employee(self, employee_id: int) -> Sequence[Vacation]:
        return self._vacations.list(employee_id=int(employee_id))
