from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.web import current_employee_id, current_role, hr_required, json_body, login_required, ok
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/rates", methods=["GET"], endpoint="list_rates")
    @hr_required
    def list_rates():
        return ok(container.overtime_service.list_rates())

    @app.route("/api/rates", methods=["PUT"], endpoint="upsert_rate")
    @hr_required
    def upsert_rate():
        body = json_body()
        rate = container.overtime_service.upsert_rate(
            category=body.get("category", ""),
            overtime_rate=body.get("overtime_rate", 0),
            holiday_overtime_rate=body.get("holiday_overtime_rate", 0),
        )
        return ok(rate, "Tarifa actualizada")

    @app.route("/api/overtime/employee/<int:employee_id>", methods=["GET"], endpoint="employee_overtime")
    @login_required
    def employee_overtime(employee_id: int):
        if current_role() not in {Role.ADMIN, Role.HR} and current_employee_id() != employee_id:
            raise AuthorizationError("No tienes permisos")
        return ok(container.overtime_service.list_for_employee(employee_id))

    @app.route("/api/overtime", methods=["POST"], endpoint="create_overtime")
    @hr_required
    def create_overtime():
        body = json_body()
        if not body.get("employee_id"):
            raise ValidationError("Empleado es obligatorio")
        overtime_id = container.overtime_service.create(
            employee_id=int(body["employee_id"]),
            hours=body.get("hours"),
            rate=body.get("rate", 0),
            work_date=parse_optional_date(body.get("date"), "Fecha") or now_local().date(),
        )
        return ok({"overtime_id": overtime_id}, "Horas extras registradas", 201)

    @app.route("/api/overtime/<int:overtime_id>/status", methods=["PATCH"], endpoint="overtime_status")
    @hr_required
    def overtime_status(overtime_id: int):
        container.overtime_service.update_status(overtime_id, json_body().get("status"))
        return ok(message="Estado de horas extras actualizado")

    @app.route("/api/overtime/<int:overtime_id>", methods=["DELETE"], endpoint="delete_overtime")
    @hr_required
    def delete_overtime(overtime_id: int):
        container.overtime_service.delete(overtime_id)
        return ok(message="Entrada de horas extras eliminada")

    @app.route("/api/overtime/import", methods=["POST"], endpoint="import_overtime")
    @hr_required
    def import_overtime():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        result = container.overtime_importer.import_workbook(upload.read())
        return ok(result, result.message)
