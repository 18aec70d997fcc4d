from __future__ import annotations

from datetime import date

import pytest

from tests.fakes import make_employee
from workforce.core.enums import RequestStatus
from workforce.core.exceptions import NotFoundError, ValidationError


def test_create_computes_total(container, repos):
    repos.employees.add(make_employee(1))

    oid = container.overtime_service.create(employee_id=1, hours="2.5", rate=14.2, work_date=date(2025, 3, 12))

    entry = repos.overtime.get_by_id(oid)
    assert entry.total == 35.5
    assert entry.status == RequestStatus.PENDING


def test_create_validates_input(container, repos):
    repos.employees.add(make_employee(1))

    with pytest.raises(NotFoundError):
        container.overtime_service.create(employee_id=2, hours=1, rate=10, work_date=date(2025, 3, 12))
    with pytest.raises(ValidationError):
        container.overtime_service.create(employee_id=1, hours=0, rate=10, work_date=date(2025, 3, 12))
    with pytest.raises(ValidationError):
        container.overtime_service.create(employee_id=1, hours=1, rate=-1, work_date=date(2025, 3, 12))


def test_update_status_accepts_lowercase(container, repos):
    repos.employees.add(make_employee(1))
    oid = container.overtime_service.create(employee_id=1, hours=1, rate=10, work_date=date(2025, 3, 12))

    container.overtime_service.update_status(oid, "approved")

    assert repos.overtime.get_by_id(oid).status == RequestStatus.APPROVED
    with pytest.raises(ValidationError):
        container.overtime_service.update_status(oid, "MAYBE")


def test_rates_are_keyed_by_upper_category(container):
    container.overtime_service.upsert_rate(category=" camarero ", overtime_rate="12", holiday_overtime_rate="18.5")

    rate = container.overtime_service.rates_by_category()["CAMARERO"]
    assert (rate.overtime_rate, rate.holiday_overtime_rate) == (12.0, 18.5)
