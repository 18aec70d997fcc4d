from __future__ import annotations

import io
from datetime import date, datetime

import pytest
from openpyxl import Workbook

from tests.fakes import make_employee
from workforce.core.exceptions import ValidationError


def _row(**values):
    row = {
        "Nombre": "",
        "Apellidos": "",
        "DNI": "",
        "Email": "",
        "Departamento": "",
        "Categoría": "",
        "Fecha Nacimiento": "",
        "Fecha Entrada": "",
        "Días Vacaciones": "",
    }
    row.update(values)
    return row


def test_rows_create_new_employees_and_update_known_dnis(container, repos):
    repos.employees.add(make_employee(1, email="ana@example.com"))

    result = container.employee_importer.import_rows(
        [
            _row(Nombre="Ana", DNI="00000001a", Departamento="Sala"),
            _row(
                Nombre="Luis",
                Apellidos="Pérez Roig",
                DNI="12345678-z",
                Categoría="camarero",
                **{"Fecha Entrada": "03/02/2025", "Días Vacaciones": 25.0},
            ),
        ]
    )

    assert (result.created, result.updated, result.errors) == (1, 1, [])
    assert result.imported == 2

    ana = repos.employees.get_by_id(1)
    assert ana.department == "Sala"
    assert ana.last_name == "García 1"
    assert ana.category == "COCINERO"
    assert ana.email == "ana@example.com"

    luis = repos.employees.get_by_dni("12345678Z")
    assert luis.full_name == "Luis Pérez Roig"
    assert luis.category == "CAMARERO"
    assert luis.hire_date == date(2025, 2, 3)
    assert luis.vacation_days_total == 25


def test_example_and_incomplete_rows_are_ignored(container, repos):
    result = container.employee_importer.import_rows(
        [
            _row(Nombre="EJEMPLO", Apellidos="Plantilla", DNI="00000000T"),
            _row(Nombre="Marta", Apellidos="Vidal"),
            _row(DNI="11111111H"),
        ]
    )

    assert result.imported == 0
    assert result.errors == []
    assert repos.employees.items == {}


def test_invalid_rows_are_reported_and_the_rest_imported(container, repos):
    result = container.employee_importer.import_rows(
        [
            _row(Nombre="Luis", Apellidos="Pérez", DNI="99999999R", **{"Fecha Nacimiento": "31/02/1990"}),
            _row(Nombre="Marta", Apellidos="Vidal", DNI="22222222J", **{"Días Vacaciones": "muchos"}),
            _row(Nombre="Joan", Apellidos="Serra", DNI="33333333P"),
        ]
    )

    assert result.created == 1
    assert result.errors[0] == "Error importando 99999999R: Fecha inválida (31/02/1990)"
    assert result.errors[1].startswith("Error importando 22222222J:")
    assert repos.employees.get_by_dni("33333333P").vacation_days_total == 30


def test_import_workbook_reads_native_cells(container, repos):
    wb = Workbook()
    ws = wb.active
    ws.append(["Nombre", "Apellidos", "DNI", "Fecha Nacimiento", "Días Vacaciones", "Puesto"])
    ws.append(["Carla", "Mas", "44444444A", datetime(1990, 7, 14), 22, None])
    buf = io.BytesIO()
    wb.save(buf)

    result = container.employee_importer.import_workbook(buf.getvalue())

    assert result.created == 1
    carla = repos.employees.get_by_dni("44444444A")
    assert carla.birth_date == date(1990, 7, 14)
    assert carla.vacation_days_total == 22
    assert carla.job_title is None


def test_import_workbook_requires_a_file(container):
    with pytest.raises(ValidationError):
        container.employee_importer.import_workbook(b"")
