from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_date_field
from ..common.validators import parse_enum
from ..common.web import current_employee_id, current_role, hr_required, json_body, login_required, ok
from ..core.enums import Role, TimeEntryType
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def _target_employee(raw) -> int:
    """Employee the request acts on: HR may pick anyone, employees only themselves."""

    own = current_employee_id()
    if raw in (None, ""):
        if own is None:
            raise ValidationError("Empleado es obligatorio")
        return own
    try:
        employee_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Empleado no válido")
    if current_role() not in {Role.ADMIN, Role.HR} and employee_id != own:
        raise AuthorizationError("No tienes permisos")
    return employee_id


def _coordinate(raw, field_name: str):
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-entries/clock", methods=["POST"], endpoint="clock")
    @login_required
    def clock():
        body = json_body()
        employee_id = _target_employee(body.get("employee_id"))
        entry_id = container.time_entry_service.clock(
            employee_id,
            parse_enum(TimeEntryType, body.get("type"), "Tipo de fichaje"),
            location=body.get("location"),
            device=body.get("device") or request.headers.get("User-Agent"),
            latitude=_coordinate(body.get("latitude"), "Latitud"),
            longitude=_coordinate(body.get("longitude"), "Longitud"),
        )
        return ok({"entry_id": entry_id}, "Fichaje registrado", 201)

    @app.route("/api/time-entries", methods=["GET"], endpoint="list_time_entries")
    @login_required
    def list_time_entries():
        raw_employee = request.args.get("employee_id")
        employee_id = _target_employee(raw_employee) if raw_employee or current_role() == Role.EMPLOYEE else None
        items = container.time_entry_service.list_range(
            parse_date_field(request.args.get("start"), "Fecha de inicio"),
            parse_date_field(request.args.get("end"), "Fecha de fin"),
            employee_id=employee_id,
        )
        return ok(items)

    @app.route("/api/time-entries/days", methods=["GET"], endpoint="time_entry_days")
    @login_required
    def time_entry_days():
        employee_id = _target_employee(request.args.get("employee_id"))
        days = container.time_entry_service.day_summaries(
            employee_id,
            parse_date_field(request.args.get("start"), "Fecha de inicio"),
            parse_date_field(request.args.get("end"), "Fecha de fin"),
        )
        return ok(days)

    @app.route("/api/time-entries/month", methods=["GET"], endpoint="time_entry_month")
    @login_required
    def time_entry_month():
        employee_id = _target_employee(request.args.get("employee_id"))
        today = now_local().date()
        try:
            year = int(request.args.get("year") or today.year)
            month = int(request.args.get("month") or today.month)
        except ValueError:
            raise ValidationError("Año o mes no válido")
        return ok(container.time_entry_service.month_summary(employee_id, year, month))

    @app.route("/api/time-entries/<int:entry_id>", methods=["DELETE"], endpoint="delete_time_entry")
    @hr_required
    def delete_time_entry(entry_id: int):
        container.time_entry_service.delete(entry_id)
        return ok(message="Fichaje eliminado")
