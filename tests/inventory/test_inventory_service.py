from __future__ import annotations

import pytest

from tests.fakes import make_employee
from workforce.core.enums import AlertSeverity, AssetCategory, AssetStatus, MovementType
from workforce.core.exceptions import ConflictError, ValidationError
from workforce.inventory.service import STOCK_ALERT_TYPE


def _item(container, *, quantity=10, min_quantity=2, name="Guantes nitrilo", size="L"):
    return container.inventory_service.create_item(
        name=name, category=AssetCategory.EPI, size=size, quantity=quantity, min_quantity=min_quantity
    )


def test_duplicate_name_and_size_is_rejected(container):
    _item(container)

    with pytest.raises(ConflictError):
        _item(container)
    assert _item(container, size="M")


def test_distribute_creates_one_asset_per_unit_and_moves_stock(container, repos):
    repos.employees.add(make_employee(1))
    item_id = _item(container)

    asset_ids = container.inventory_service.distribute(
        item_id=item_id, employee_id=1, quantity=3, user_id=9, serial_number="SN-1"
    )

    assert len(asset_ids) == 3
    assert repos.inventory.get_item(item_id).quantity == 7
    assets = repos.assets.list(employee_id=1)
    assert [a.serial_number for a in assets] == ["SN-1", None, None]
    assert all(a.status == AssetStatus.ASSIGNED for a in assets)
    [movement] = repos.inventory.list_movements(item_id)
    assert (movement.movement_type, movement.quantity, movement.employee_id) == (MovementType.ASSIGNMENT, 3, 1)


def test_distribute_more_than_stock_fails(container, repos):
    repos.employees.add(make_employee(1))
    item_id = _item(container, quantity=1)

    with pytest.raises(ValidationError):
        container.inventory_service.distribute(item_id=item_id, employee_id=1, quantity=2, user_id=9)


def test_low_stock_raises_warning_then_critical(container, repos):
    repos.employees.add(make_employee(1))
    item_id = _item(container, quantity=3, min_quantity=2)

    container.inventory_service.distribute(item_id=item_id, employee_id=1, quantity=1, user_id=9)
    container.inventory_service.distribute(item_id=item_id, employee_id=1, quantity=2, user_id=9)

    alerts = container.alert_service.list()
    assert [a.severity for a in alerts] == [AlertSeverity.CRITICAL, AlertSeverity.WARNING]
    assert alerts[0].alert_type == STOCK_ALERT_TYPE
    assert alerts[0].message.startswith("STOCK AGOTADO")
    assert alerts[1].metadata == {"itemId": item_id, "currentStock": 2, "minStock": 2}


def test_return_puts_unit_back_once(container, repos):
    repos.employees.add(make_employee(1))
    item_id = _item(container)
    [asset_id] = container.inventory_service.distribute(item_id=item_id, employee_id=1, quantity=1, user_id=9)

    container.inventory_service.return_asset(asset_id=asset_id, user_id=9)

    assert repos.inventory.get_item(item_id).quantity == 10
    assert repos.assets.get_by_id(asset_id).status == AssetStatus.RETURNED
    with pytest.raises(ValidationError):
        container.inventory_service.return_asset(asset_id=asset_id, user_id=9)


def test_add_stock_requires_positive_amount(container):
    item_id = _item(container)

    with pytest.raises(ValidationError):
        container.inventory_service.add_stock(item_id=item_id, amount=0, user_id=9)

    container.inventory_service.add_stock(item_id=item_id, amount="5", user_id=9)
    assert container.inventory_service.get_item(item_id).quantity == 15


def test_consume_by_name_is_case_insensitive_and_skips_empty_stock(container):
    _item(container, quantity=0, name="Casco")
    in_stock = _item(container, quantity=1, name="Gafas")

    assert container.inventory_service.consume_by_name("casco") is None
    assert container.inventory_service.consume_by_name(" GAFAS ") == in_stock
    assert container.inventory_service.get_item(in_stock).quantity == 0
