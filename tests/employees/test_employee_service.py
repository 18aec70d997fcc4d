from __future__ import annotations

from datetime import date

import pytest

from tests.fakes import FakeCompanyRepo, FakeEmployeeRepo
from workforce.core.exceptions import ConflictError, NotFoundError, ValidationError
from workforce.employees.model import EmployeeData
from workforce.employees.mysql_employee_repository import _row_to_employee
from workforce.employees.service import EmployeeService, employee_data_from_payload


def _service():
    companies = FakeCompanyRepo()
    employees = FakeEmployeeRepo(companies)
    return EmployeeService(employees, companies), employees, companies


def test_create_normalizes_dni_and_category():
    svc, employees, companies = _service()
    company_id = companies.create(name="Hotel Sol", cif="B12345678")

    emp_id = svc.create(
        EmployeeData(dni=" 1234-5678 z", first_name=" Ana ", last_name="López", company_id=company_id, category="camarero")
    )

    emp = employees.get_by_id(emp_id)
    assert emp.dni == "12345678Z"
    assert emp.first_name == "Ana"
    assert emp.category == "CAMARERO"
    assert emp.company_name == "Hotel Sol"


def test_duplicate_dni_is_rejected():
    svc, _, _ = _service()
    svc.create(EmployeeData(dni="12345678Z", first_name="Ana", last_name="López"))

    with pytest.raises(ConflictError):
        svc.create(EmployeeData(dni="12345678z", first_name="Otra", last_name="Persona"))


def test_unknown_company_and_self_manager():
    svc, _, _ = _service()

    with pytest.raises(NotFoundError):
        svc.create(EmployeeData(dni="1A", first_name="Ana", last_name="López", company_id=99))

    emp_id = svc.create(EmployeeData(dni="1A", first_name="Ana", last_name="López"))
    with pytest.raises(ValidationError):
        svc.update(emp_id, EmployeeData(dni="1A", first_name="Ana", last_name="López", manager_id=emp_id))


def test_payload_parsing_defaults_quota_and_dates():
    data = employee_data_from_payload(
        {"dni": "1A", "first_name": "Ana", "last_name": "López", "hire_date": "2024-02-01", "company_id": ""}
    )

    assert data.vacation_days_total is None
    assert data.hire_date == date(2024, 2, 1)
    assert data.company_id is None

    with pytest.raises(ValidationError):
        employee_data_from_payload({"dni": "1A", "birth_date": "01/02/1990"})


def test_vacation_quota_uses_configured_default_and_keeps_current_on_update():
    companies = FakeCompanyRepo()
    employees = FakeEmployeeRepo(companies)
    svc = EmployeeService(employees, companies, default_vacation_days=22)

    emp_id = svc.create(EmployeeData(dni="1A", first_name="Ana", last_name="López"))
    assert employees.get_by_id(emp_id).vacation_days_total == 22

    svc.update(emp_id, EmployeeData(dni="1A", first_name="Ana", last_name="López", vacation_days_total=0))
    assert employees.get_by_id(emp_id).vacation_days_total == 0

    svc.update(emp_id, EmployeeData(dni="1A", first_name="Ana", last_name="Pons"))
    assert employees.get_by_id(emp_id).vacation_days_total == 0


def test_stored_zero_quota_is_not_replaced_by_default():
    row = {"employee_id": 1, "dni": "12345678Z", "first_name": "Ana", "last_name": "López"}

    assert _row_to_employee({**row, "vacation_days_total": 0}).vacation_days_total == 0
    assert _row_to_employee({**row, "vacation_days_total": None}).vacation_days_total == 30


def test_company_office_location_is_validated():
    svc, _, companies = _service()

    cid = svc.create_company(name="Hotel Sol", cif="b12345678", office_latitude="39.5696", office_longitude=2.65016)
    company = companies.get_by_id(cid)
    assert company.cif == "B12345678"
    assert company.has_office_location
    assert company.allowed_radius == 100

    with pytest.raises(ValidationError):
        svc.create_company(name="Sin longitud", cif=None, office_latitude=39.5)
    with pytest.raises(ValidationError):
        svc.create_company(name="Fuera", cif=None, office_latitude=95, office_longitude=2.6)
    with pytest.raises(ValidationError):
        svc.create_company(name="Radio", cif=None, office_latitude=39.5, office_longitude=2.6, allowed_radius=0)
