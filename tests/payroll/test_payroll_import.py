from __future__ import annotations

import pytest

from tests.fakes import make_employee
from workforce.core.enums import PayrollBatchStatus
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.payroll.importer import parse_money

CSV = (
    "Nombre;DNI;Bruto;SS Empresa;IRPF;Neto\n"
    "Ana López;12345678-z;1.850,40;590,10;185,00;1.500,20\n"
    ";;;;;\n"
    "Sin Ficha;00000000T;1.000;;;900\n"
).encode("utf-8")


def test_parse_money_spanish_format():
    assert parse_money("1.200,50") == 1200.5
    assert parse_money(" 950,00 € ") == 950.0
    assert parse_money(1234.5) == 1234.5
    assert parse_money("") == 0.0
    assert parse_money("n/d") == 0.0


def test_upload_then_map(container, repos, fixed_now):
    repos.employees.add(make_employee(1, dni="12345678Z"))

    upload = container.payroll_import_service.upload(data=CSV, filename="nominas marzo.csv", user_id=9)

    assert upload.headers == ["Nombre", "DNI", "Bruto", "SS Empresa", "IRPF", "Neto"]
    batch = container.payroll_import_service.get_batch(upload.batch_id)
    assert (batch.year, batch.month, batch.status) == (fixed_now.year, fixed_now.month, PayrollBatchStatus.UPLOADED)
    assert batch.file_key.startswith("payroll/2025-03/")

    count = container.payroll_import_service.apply_mapping(
        upload.batch_id,
        {"employee_name": "Nombre", "employee_dni": "DNI", "gross": "Bruto", "ss_company": "SS Empresa", "irpf": "IRPF", "net": "Neto"},
    )

    assert count == 2
    assert container.payroll_import_service.get_batch(upload.batch_id).status == PayrollBatchStatus.MAPPED
    ana, unknown = container.payroll_import_service.rows(upload.batch_id)
    assert (ana.employee_id, ana.employee_dni, ana.gross, ana.ss_company, ana.net) == (1, "12345678Z", 1850.4, 590.1, 1500.2)
    assert ana.ss_employee == 0.0
    assert ana.extra_data["Nombre"] == "Ana López"
    assert unknown.employee_id is None
    assert (unknown.gross, unknown.irpf) == (1000.0, 0.0)


def test_mapping_validation(container):
    upload = container.payroll_import_service.upload(data=CSV, filename="nominas.csv", user_id=9)

    with pytest.raises(ValidationError, match="destino"):
        container.payroll_import_service.apply_mapping(upload.batch_id, {"salary": "Bruto"})
    with pytest.raises(ValidationError, match="Columnas"):
        container.payroll_import_service.apply_mapping(upload.batch_id, {"gross": "Sueldo"})
    with pytest.raises(ValidationError):
        container.payroll_import_service.apply_mapping(upload.batch_id, {})
    with pytest.raises(NotFoundError):
        container.payroll_import_service.apply_mapping(999, {"gross": "Bruto"})


def test_unsupported_extension(container):
    with pytest.raises(ValidationError):
        container.payroll_import_service.upload(data=b"x", filename="nominas.pdf", user_id=9)
