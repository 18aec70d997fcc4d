from __future__ import annotations

from datetime import date

import pytest

from tests.fakes import make_employee
from workforce.core.enums import AssetCategory, AssetStatus
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.documents.model import DeliveryItem


def test_offboarding_returns_assets_and_deactivates(container, repos):
    repos.employees.add(make_employee(1))
    item_id = repos.inventory.create_item(
        name="Chaqueta", category=AssetCategory.UNIFORM, size="M", quantity=5, min_quantity=0
    )
    asset_ids = container.inventory_service.distribute(item_id=item_id, employee_id=1, quantity=2, user_id=9)

    data = container.offboarding_service.get_offboarding_data(1)
    assert len(data.assets) == 2

    result = container.offboarding_service.complete_offboarding(
        employee_id=1, exit_date=date(2025, 3, 31), reason="Fin de contrato", return_asset_ids=asset_ids + [999]
    )

    assert result.assets_returned == 2
    assert result.deactivated is True
    assert result.errors and result.errors[0].startswith("Material 999")
    assert repos.inventory.get_item(item_id).quantity == 5
    emp = repos.employees.get_by_id(1)
    assert emp.is_active is False
    assert emp.exit_date == date(2025, 3, 31)
    assert all(a.status == AssetStatus.RETURNED for a in repos.assets.list(employee_id=1))


def test_offboarding_exit_before_hire_is_rejected(container, repos):
    repos.employees.add(make_employee(1, hire_date=date(2025, 1, 1)))

    with pytest.raises(ValidationError):
        container.offboarding_service.complete_offboarding(employee_id=1, exit_date=date(2024, 12, 31), reason=None)


def test_onboarding_generates_delivery_documents(container, repos):
    repos.employees.add(make_employee(1))

    docs = container.onboarding_service.onboard(
        employee_id=1,
        uniform_items=[DeliveryItem(name="Pantalón", size="42")],
        epi_items=[DeliveryItem(name="Guantes")],
    )

    assert [d.name for d in docs] == ["Entrega Uniforme (Generado)", "Entrega EPIs (Generado)"]
    assert len(repos.documents.list_for_employee(1)) == 2
    assert {a.category for a in repos.assets.list(employee_id=1)} == {AssetCategory.UNIFORM, AssetCategory.EPI}


def test_onboarding_needs_active_employee_and_something_to_do(container, repos):
    repos.employees.add(make_employee(1))
    repos.employees.add(make_employee(2, is_active=False))

    with pytest.raises(ValidationError):
        container.onboarding_service.onboard(employee_id=1)

    with pytest.raises(ValidationError):
        container.onboarding_service.onboard(employee_id=2, epi_items=[DeliveryItem(name="Guantes")])


def test_onboarding_without_model_145_template_leaves_nothing_behind(container, repos):
    repos.employees.add(make_employee(1))
    item_id = repos.inventory.create_item(
        name="Guantes", category=AssetCategory.EPI, size=None, quantity=3, min_quantity=0
    )

    with pytest.raises(NotFoundError):
        container.onboarding_service.onboard(
            employee_id=1, epi_items=[DeliveryItem(name="Guantes")], include_model_145=True
        )

    assert repos.documents.list_for_employee(1) == []
    assert list(repos.assets.list(employee_id=1)) == []
    assert repos.inventory.get_item(item_id).quantity == 3
