from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_date_field
from ..common.validators import parse_enum
from ..common.web import (
    current_employee_id,
    current_role,
    current_user_id,
    hr_required,
    json_body,
    login_required,
    ok,
)
from ..core.enums import RequestStatus, Role, VacationType
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def _own_or_hr(employee_id: int) -> None:
    if current_role() in {Role.ADMIN, Role.HR}:
        return
    if current_employee_id() != int(employee_id):
        raise AuthorizationError("No tienes permisos")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/vacations", methods=["GET"], endpoint="list_vacations")
    @login_required
    def list_vacations():
        if current_role() in {Role.ADMIN, Role.HR}:
            status = request.args.get("status")
            items = container.vacation_service.list_all(
                status=parse_enum(RequestStatus, status, "Estado") if status else None
            )
        else:
            employee_id = current_employee_id()
            items = container.vacation_service.list_for_employee(employee_id) if employee_id else []
        return ok(items)

    @app.route("/api/vacations/employee/<int:employee_id>", methods=["GET"], endpoint="employee_vacations")
    @login_required
    def employee_vacations(employee_id: int):
        _own_or_hr(employee_id)
        return ok(container.vacation_service.list_for_employee(employee_id))

    @app.route("/api/vacations/balance/<int:employee_id>", methods=["GET"], endpoint="vacation_balance")
    @login_required
    def vacation_balance(employee_id: int):
        _own_or_hr(employee_id)
        try:
            year = int(request.args.get("year") or now_local().year)
        except ValueError:
            raise ValidationError("Año no válido")
        return ok(container.vacation_service.balance(employee_id, year))

    @app.route("/api/vacations", methods=["POST"], endpoint="create_vacation")
    @login_required
    def create_vacation():
        body = json_body()
        employee_id = body.get("employee_id") or current_employee_id()
        if not employee_id:
            raise ValidationError("Empleado es obligatorio")

        vacation_id = container.vacation_service.create(
            current_role=current_role(),
            current_user_id=current_user_id(),
            current_employee_id=current_employee_id(),
            employee_id=int(employee_id),
            start_date=parse_date_field(body.get("start_date"), "Fecha de inicio"),
            end_date=parse_date_field(body.get("end_date"), "Fecha de fin"),
            vacation_type=parse_enum(VacationType, body.get("type") or "VACATION", "Tipo"),
            reason=body.get("reason"),
        )
        return ok({"vacation_id": vacation_id}, "Solicitud registrada", 201)

    @app.route("/api/vacations/<int:vacation_id>/approve", methods=["POST"], endpoint="approve_vacation")
    @hr_required
    def approve_vacation(vacation_id: int):
        container.vacation_service.approve(current_role=current_role(), user_id=current_user_id(), vacation_id=vacation_id)
        return ok(message="Solicitud aprobada")

    @app.route("/api/vacations/<int:vacation_id>/reject", methods=["POST"], endpoint="reject_vacation")
    @hr_required
    def reject_vacation(vacation_id: int):
        container.vacation_service.reject(current_role=current_role(), user_id=current_user_id(), vacation_id=vacation_id)
        return ok(message="Solicitud rechazada")

    @app.route("/api/vacations/<int:vacation_id>", methods=["DELETE"], endpoint="delete_vacation")
    @login_required
    def delete_vacation(vacation_id: int):
        container.vacation_service.delete(
            current_role=current_role(), current_employee_id=current_employee_id(), vacation_id=vacation_id
        )
        return ok(message="Solicitud eliminada")
