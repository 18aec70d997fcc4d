"""Onboarding and offboarding: document generation and record updates in sequence."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text
from ..core.enums import AssetStatus, RequestStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..documents.model import DeliveryItem, Document
from ..inventory.asset_model import Asset
from ..inventory.service import InventoryService
from ..vacations.model import Vacation
from ..vacations.repository import VacationRepository
from .model import Employee
from .repository import EmployeeRepository

if TYPE_CHECKING:
    from ..documents.service import DocumentService

log = get_logger("employees.lifecycle")


@dataclass(frozen=True)
class OffboardingData:
    employee: Employee
    assets: Sequence[Asset]
    vacations: Sequence[Vacation]


@dataclass(frozen=True)
class OffboardingResult:
    assets_returned: int
    deactivated: bool
    errors: list[str] = field(default_factory=list)


class OffboardingService:
    def __init__(
        self,
        employees: EmployeeRepository,
        inventory: InventoryService,
        vacations: VacationRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._inventory = inventory
        self._vacations = vacations
        self._clock = clock

    def _employee(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")
        return emp

    def get_offboarding_data(self, employee_id: int) -> OffboardingData:
        emp = self._employee(employee_id)
        return OffboardingData(
            employee=emp,
            assets=self._inventory.list_assets(employee_id=emp.employee_id, status=AssetStatus.ASSIGNED),
            vacations=self._vacations.list(employee_id=emp.employee_id, status=RequestStatus.APPROVED),
        )

    def complete_offboarding(
        self,
        *,
        employee_id: int,
        exit_date: Optional[date],
        reason: Optional[str],
        return_asset_ids: Sequence[int] = (),
        user_id: Optional[int] = None,
    ) -> OffboardingResult:
        """Return the listed assets then deactivate; asset failures are reported, not raised."""

        emp = self._employee(employee_id)
        exit_date = exit_date or self._clock().date()
        if emp.hire_date and exit_date < emp.hire_date:
            raise ValidationError("La fecha de baja no puede ser anterior a la fecha de alta")

        returned = 0
        errors: list[str] = []
        for asset_id in return_asset_ids:
            try:
                self._inventory.return_asset(asset_id=int(asset_id), user_id=user_id, notes="Devolución por baja")
                returned += 1
            except (DomainError, ValueError, TypeError) as exc:
                errors.append(f"Material {asset_id}: {exc}")
                log.warning("Offboarding employee %s: asset %s not returned (%s)", emp.employee_id, asset_id, exc)

        deactivated = self._employees.deactivate(
            emp.employee_id, exit_date=exit_date, exit_reason=optional_text(reason)
        )
        log.info(
            "Offboarding employee %s: returned=%s deactivated=%s errors=%s",
            emp.employee_id,
            returned,
            deactivated,
            len(errors),
        )
        return OffboardingResult(assets_returned=returned, deactivated=bool(deactivated), errors=errors)


class OnboardingService:
    def __init__(self, employees: EmployeeRepository, documents: "DocumentService"):
        self._employees = employees
        self._documents = documents

    def onboard(
        self,
        *,
        employee_id: int,
        uniform_items: Sequence[DeliveryItem] = (),
        epi_items: Sequence[DeliveryItem] = (),
        include_model_145: bool = False,
        user_id: Optional[int] = None,
    ) -> list[Document]:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")
        if not emp.is_active:
            raise ValidationError("El empleado está dado de baja")
        if not (uniform_items or epi_items or include_model_145):
            raise ValidationError("No hay documentos que generar")
        if include_model_145:
            # fail before any asset is assigned or stock consumed
            self._documents.model_145_template()

        created: list[Document] = []
        if uniform_items:
            created.append(self._documents.generate_uniform(emp.employee_id, uniform_items, user_id=user_id))
        if epi_items:
            created.append(self._documents.generate_epi(emp.employee_id, epi_items, user_id=user_id))
        if include_model_145:
            created.append(self._documents.generate_model_145(emp.employee_id))

        log.info("Onboarding employee %s: %s documents generated", emp.employee_id, len(created))
        return created
