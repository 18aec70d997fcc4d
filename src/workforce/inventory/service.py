from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

from ..alerts.service import AlertService
from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AlertSeverity, AssetCategory, AssetStatus, MovementType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .asset_model import Asset
from .asset_repository import AssetRepository
from .model import InventoryItem, InventoryMovement
from .repository import InventoryRepository

log = get_logger("inventory")

STOCK_ALERT_TYPE = "INVENTORY_STOCK"

_INCOMING = {MovementType.ENTRY, MovementType.RETURN}


def _positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")
    if number <= 0:
        raise ValidationError(f"{field_name} debe ser mayor que cero")
    return number


def _non_negative_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")
    if number < 0:
        raise ValidationError(f"{field_name} no puede ser negativo")
    return number


class InventoryService:
    def __init__(
        self,
        items: InventoryRepository,
        assets: AssetRepository,
        alerts: AlertService,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._items = items
        self._assets = assets
        self._alerts = alerts
        self._employees = employees
        self._clock = clock

    # items

    def list_items(self) -> Sequence[InventoryItem]:
        return self._items.list_items()

    def get_item(self, item_id: int) -> InventoryItem:
        item = self._items.get_item(int(item_id))
        if not item:
            raise NotFoundError("Artículo no encontrado")
        return item

    def create_item(self, *, name: str, category, size: Optional[str], quantity, min_quantity) -> int:
        name = require_non_empty(name, "Nombre")
        size = optional_text(size)
        if self._items.find_item(name=name, size=size):
            raise ConflictError("Ya existe un artículo con ese nombre y talla")
        return self._items.create_item(
            name=name,
            category=category,
            size=size,
            quantity=_non_negative_int(quantity, "Cantidad"),
            min_quantity=_non_negative_int(min_quantity, "Cantidad mínima"),
        )

    def update_item(self, item_id: int, *, name: str, category: AssetCategory, size: Optional[str], min_quantity) -> None:
        item = self.get_item(item_id)
        name = require_non_empty(name, "Nombre")
        size = optional_text(size)
        other = self._items.find_item(name=name, size=size)
        if other and other.item_id != item.item_id:
            raise ConflictError("Ya existe un artículo con ese nombre y talla")
        self._items.update_item(
            item.item_id,
            name=name,
            category=category,
            size=size,
            min_quantity=_non_negative_int(min_quantity, "Cantidad mínima"),
        )
        self.check_stock_levels(item.item_id)

    def delete_item(self, item_id: int) -> None:
        if not self._items.delete_item(int(item_id)):
            raise NotFoundError("Artículo no encontrado")

    def movements(self, item_id: int) -> Sequence[InventoryMovement]:
        self.get_item(item_id)
        return self._items.list_movements(int(item_id))

    # stock

    def check_stock_levels(self, item_id: int) -> Optional[int]:
        """Raise a stock alert when quantity is at or below the minimum; returns the alert id."""

        item = self._items.get_item(int(item_id))
        if not item or item.quantity > item.min_quantity:
            return None

        if item.quantity <= 0:
            severity = AlertSeverity.CRITICAL
            message = f"STOCK AGOTADO: {item.label}"
        else:
            severity = AlertSeverity.WARNING
            message = f"Stock bajo ({item.quantity}): {item.label}. Mínimo: {item.min_quantity}"

        return self._alerts.raise_alert(
            alert_type=STOCK_ALERT_TYPE,
            severity=severity,
            title="Alerta de Inventario",
            message=message,
            action_url="/inventory",
            metadata={"itemId": item.item_id, "currentStock": item.quantity, "minStock": item.min_quantity},
        )

    def record_movement(
        self,
        *,
        item_id: int,
        movement_type: MovementType,
        quantity: int,
        user_id: Optional[int],
        employee_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        item = self.get_item(item_id)
        quantity = _positive_int(quantity, "Cantidad")

        movement_id = self._items.add_movement(
            item_id=item.item_id,
            movement_type=movement_type,
            quantity=quantity,
            user_id=user_id,
            employee_id=employee_id,
            notes=optional_text(notes),
        )
        delta = quantity if movement_type in _INCOMING else -quantity
        self._items.adjust_quantity(item.item_id, delta)
        log.info("Movement %s on item %s: %s %+d", movement_id, item.item_id, movement_type.value, delta)

        self.check_stock_levels(item.item_id)
        return movement_id

    def add_stock(self, *, item_id: int, amount, user_id: Optional[int], notes: Optional[str] = None) -> int:
        return self.record_movement(
            item_id=item_id,
            movement_type=MovementType.ENTRY,
            quantity=_positive_int(amount, "Cantidad"),
            user_id=user_id,
            notes=notes or "Entrada de stock",
        )

    def distribute(
        self,
        *,
        item_id: int,
        employee_id: int,
        quantity,
        user_id: Optional[int],
        serial_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> list[int]:
        """Hand ``quantity`` units to an employee; one ASSIGNED asset per unit."""

        item = self.get_item(item_id)
        quantity = _positive_int(quantity, "Cantidad")
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Empleado no encontrado")
        if item.quantity < quantity:
            raise ValidationError(f"Stock insuficiente: disponibles {item.quantity}, solicitados {quantity}")

        now = self._clock()
        asset_ids = [
            self._assets.create(
                employee_id=int(employee_id),
                inventory_item_id=item.item_id,
                category=item.category,
                name=item.label,
                serial_number=optional_text(serial_number) if i == 0 else None,
                assigned_date=now,
                notes=optional_text(notes),
            )
            for i in range(quantity)
        ]
        self.record_movement(
            item_id=item.item_id,
            movement_type=MovementType.ASSIGNMENT,
            quantity=quantity,
            user_id=user_id,
            employee_id=int(employee_id),
            notes=notes or "Entrega a empleado",
        )
        return asset_ids

    def return_asset(self, *, asset_id: int, user_id: Optional[int], notes: Optional[str] = None) -> int:
        asset = self._assets.get_by_id(int(asset_id))
        if not asset or not asset.inventory_item_id:
            raise ValidationError("El material no está vinculado al inventario")
        if asset.status != AssetStatus.ASSIGNED:
            raise ValidationError("El material ya ha sido devuelto")

        self._assets.mark_returned(asset.asset_id, return_date=self._clock())
        return self.record_movement(
            item_id=asset.inventory_item_id,
            movement_type=MovementType.RETURN,
            quantity=1,
            user_id=user_id,
            employee_id=asset.employee_id,
            notes=notes or "Devolución de material",
        )

    def consume_by_name(
        self, name: str, *, user_id: Optional[int] = None, employee_id: Optional[int] = None
    ) -> Optional[int]:
        """Take one unit of a same-named item if any is in stock; returns its id."""

        item = self._items.find_in_stock_by_name((name or "").strip())
        if not item:
            return None
        self.record_movement(
            item_id=item.item_id,
            movement_type=MovementType.ASSIGNMENT,
            quantity=1,
            user_id=user_id,
            employee_id=employee_id,
            notes="Entrega documentada",
        )
        return item.item_id

    # assets

    def list_assets(
        self, *, employee_id: Optional[int] = None, status: Optional[AssetStatus] = None
    ) -> Sequence[Asset]:
        return self._assets.list(employee_id=employee_id, status=status)

    def create_asset(
        self,
        *,
        employee_id: Optional[int],
        category: AssetCategory,
        name: str,
        serial_number: Optional[str] = None,
        notes: Optional[str] = None,
        inventory_item_id: Optional[int] = None,
    ) -> int:
        if employee_id is not None and not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Empleado no encontrado")
        return self._assets.create(
            employee_id=int(employee_id) if employee_id is not None else None,
            inventory_item_id=inventory_item_id,
            category=category,
            name=require_non_empty(name, "Nombre"),
            serial_number=optional_text(serial_number),
            assigned_date=self._clock(),
            notes=optional_text(notes),
        )
