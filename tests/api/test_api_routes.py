from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from tests.fakes import make_employee
from workforce.anomalies.model import AnomalyReason
from workforce.core.enums import AnomalyEntityType, Role
from workforce.main import create_app
from workforce.users.model import User


@pytest.fixture
def client(monkeypatch, container, repos):
    monkeypatch.setenv("APP_ENV", "testing")
    repos.users.add(
        User(user_id=1, username="rrhh", password_hash=generate_password_hash("rrhh1234"), full_name="RRHH", role=Role.HR)
    )
    repos.users.add(
        User(
            user_id=2,
            username="ana",
            password_hash=generate_password_hash("ana12345"),
            full_name="Ana",
            role=Role.EMPLOYEE,
            employee_id=1,
        )
    )
    repos.employees.add(make_employee(1, dni="12345678Z"))
    repos.employees.add(make_employee(2, dni="87654321X"))
    app = create_app(container=container)
    return app.test_client()


def _login(client, username, password):
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200
    return resp.get_json()["data"]


def test_health_and_login_required(client):
    assert client.get("/api/health").get_json() == {"success": True, "status": "ok"}

    resp = client.get("/api/employees")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_bad_credentials_map_to_401(client):
    resp = client.post("/api/auth/login", json={"username": "rrhh", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Usuario o contraseña incorrectos"


def test_hr_creates_employee_and_duplicate_is_409(client):
    _login(client, "rrhh", "rrhh1234")
    body = {"dni": "11111111H", "first_name": "Luis", "last_name": "Pons", "hire_date": "2025-01-02"}

    created = client.post("/api/employees", json=body)
    assert created.status_code == 201

    again = client.post("/api/employees", json=body)
    assert again.status_code == 409
    assert again.get_json()["message"] == "Ya existe un empleado con ese DNI"


def test_employee_scope(client):
    session_user = _login(client, "ana", "ana12345")
    assert session_user["role"] == "employee"

    assert client.get("/api/employees/1").status_code == 200
    assert client.get("/api/employees/2").status_code == 403
    assert client.post("/api/employees", json={}).status_code == 403


def test_employee_clocks_in_and_sees_report(client):
    _login(client, "ana", "ana12345")

    resp = client.post("/api/time-entries/clock", json={"type": "in", "location": "Oficina"})
    assert resp.status_code == 201

    out_of_order = client.post("/api/time-entries/clock", json={"type": "IN"})
    assert out_of_order.status_code == 400

    report = client.get("/api/payroll/report?start=2025-03-01&end=2025-03-31")
    assert report.status_code == 200
    rows = report.get_json()["data"]["rows"]
    assert [r["employee_id"] for r in rows] == [1]


def test_report_csv_download(client):
    _login(client, "rrhh", "rrhh1234")

    resp = client.get("/api/payroll/report.csv?start=2025-03-01&end=2025-03-31")

    assert resp.status_code == 200
    assert "attachment" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\xef\xbb\xbf")


def test_not_found_maps_to_404(client):
    _login(client, "rrhh", "rrhh1234")

    resp = client.get("/api/documents/999/download")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Documento no encontrado"}


def test_anomaly_review_routes(client, repos):
    aid = repos.anomalies.upsert(
        entity_type=AnomalyEntityType.TIME_ENTRY,
        entity_id=7,
        employee_id=1,
        score=20,
        reasons=[AnomalyReason("OFF_HOURS", "Fichaje fuera del horario habitual.", 20)],
    )

    _login(client, "ana", "ana12345")
    assert client.get("/api/anomalies").status_code == 403
    assert client.get("/api/anomalies/employee/2").status_code == 403
    [own] = client.get("/api/anomalies/employee/1").get_json()["data"]
    assert own["reasons"][0]["code"] == "OFF_HOURS"

    _login(client, "rrhh", "rrhh1234")
    resp = client.put(f"/api/anomalies/{aid}/status", json={"status": "resolved"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "RESOLVED"
    assert client.get("/api/anomalies?status=OPEN").get_json()["data"] == []
    assert client.put("/api/anomalies/99/status", json={"status": "RESOLVED"}).status_code == 404
