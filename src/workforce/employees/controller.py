from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_employee_id, current_role, current_user_id, hr_required, json_body, login_required, ok, to_jsonable
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from ..documents.controller import delivery_items
from .service import employee_data_from_payload


def _active_arg():
    raw = (request.args.get("active") or "").strip().lower()
    if not raw:
        return None
    if raw in {"1", "true", "yes"}:
        return True
    if raw in {"0", "false", "no"}:
        return False
    raise ValidationError("Parámetro no válido: active")


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @hr_required
    def list_employees():
        company_id = request.args.get("company_id")
        return ok(
            employees.list(
                search=request.args.get("search"),
                company_id=int(company_id) if company_id and company_id.isdigit() else None,
                active=_active_arg(),
            )
        )

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @login_required
    def get_employee(employee_id: int):
        if current_role() not in {Role.ADMIN, Role.HR} and current_employee_id() != employee_id:
            raise AuthorizationError("No tienes permisos")
        emp = employees.get(employee_id)
        data = to_jsonable(emp)
        data["full_name"] = emp.full_name
        return ok(data)

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @hr_required
    def create_employee():
        employee_id = employees.create(employee_data_from_payload(json_body()))
        return ok({"employee_id": employee_id}, "Empleado creado", 201)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @hr_required
    def update_employee(employee_id: int):
        employees.update(employee_id, employee_data_from_payload(json_body()))
        return ok(message="Empleado actualizado")

    @app.route("/api/employees/import", methods=["POST"], endpoint="import_employees")
    @hr_required
    def import_employees():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        result = container.employee_importer.import_workbook(upload.read())
        return ok(
            {"created": result.created, "updated": result.updated, "imported": result.imported, "errors": result.errors},
            f"Importación completada. {result.imported} empleados procesados.",
        )

    @app.route("/api/employees/<int:employee_id>/offboarding", methods=["GET"], endpoint="offboarding_data")
    @hr_required
    def offboarding_data(employee_id: int):
        return ok(container.offboarding_service.get_offboarding_data(employee_id))

    @app.route("/api/employees/<int:employee_id>/offboarding", methods=["POST"], endpoint="complete_offboarding")
    @hr_required
    def complete_offboarding(employee_id: int):
        body = json_body()
        result = container.offboarding_service.complete_offboarding(
            employee_id=employee_id,
            exit_date=parse_optional_date(body.get("exit_date"), "Fecha de baja"),
            reason=body.get("reason"),
            return_asset_ids=body.get("return_asset_ids") or [],
            user_id=current_user_id(),
        )
        return ok(result, "Baja completada")

    @app.route("/api/employees/<int:employee_id>/onboarding", methods=["POST"], endpoint="onboard_employee")
    @hr_required
    def onboard_employee(employee_id: int):
        body = json_body()
        docs = container.onboarding_service.onboard(
            employee_id=employee_id,
            uniform_items=delivery_items(body.get("uniform_items")),
            epi_items=delivery_items(body.get("epi_items")),
            include_model_145=bool(body.get("include_model_145")),
            user_id=current_user_id(),
        )
        return ok(docs, "Documentación de alta generada", 201)

    @app.route("/api/companies", methods=["GET"], endpoint="list_companies")
    @login_required
    def list_companies():
        return ok(employees.list_companies())

    @app.route("/api/companies", methods=["POST"], endpoint="create_company")
    @hr_required
    def create_company():
        body = json_body()
        company_id = employees.create_company(
            name=body.get("name", ""),
            cif=body.get("cif"),
            office_latitude=body.get("office_latitude"),
            office_longitude=body.get("office_longitude"),
            allowed_radius=body.get("allowed_radius"),
        )
        return ok({"company_id": company_id}, "Empresa creada", 201)
