from __future__ import annotations

import io
from datetime import date

from flask import Flask, request, send_file

from ..common.datetime_utils import parse_date_field
from ..common.web import current_employee_id, current_role, current_user_id, hr_required, json_body, login_required, ok
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .export import XLSX_MIMETYPE, report_csv, report_xlsx


def register(app: Flask, container: Container) -> None:
    def _report():
        today = date.today()
        start = parse_date_field(request.args.get("start") or today.replace(day=1).isoformat(), "Fecha de inicio")
        end = parse_date_field(request.args.get("end") or today.isoformat(), "Fecha de fin")

        raw_employee = request.args.get("employee_id")
        employee_id = int(raw_employee) if raw_employee and raw_employee.isdigit() else None
        department = request.args.get("department") or None
        if current_role() not in {Role.ADMIN, Role.HR}:
            own = current_employee_id()
            if own is None or (employee_id is not None and employee_id != own):
                raise AuthorizationError("No tienes permisos")
            employee_id, department = own, None

        data = container.payroll_report_service.build_hours_report(
            start=start, end=end, employee_id=employee_id, department=department
        )
        return data, start, end

    @app.route("/api/payroll/report", methods=["GET"], endpoint="payroll_report")
    @login_required
    def payroll_report():
        data, _, _ = _report()
        return ok(data)

    @app.route("/api/payroll/report.csv", methods=["GET"], endpoint="payroll_report_csv")
    @login_required
    def payroll_report_csv():
        data, start, end = _report()
        filename = f"informe_horas_{start:%Y%m%d}_{end:%Y%m%d}.csv"
        return app.response_class(
            report_csv(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/payroll/report.xlsx", methods=["GET"], endpoint="payroll_report_xlsx")
    @login_required
    def payroll_report_xlsx():
        data, start, end = _report()
        return send_file(
            io.BytesIO(report_xlsx(data)),
            download_name=f"informe_horas_{start:%Y%m%d}_{end:%Y%m%d}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/api/payroll/upload", methods=["POST"], endpoint="payroll_upload")
    @hr_required
    def payroll_upload():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        result = container.payroll_import_service.upload(
            data=upload.read(), filename=upload.filename or "nominas.xlsx", user_id=current_user_id()
        )
        return ok(result, result.message, 201)

    @app.route("/api/payroll/batches", methods=["GET"], endpoint="payroll_batches")
    @hr_required
    def payroll_batches():
        return ok(container.payroll_import_service.list_batches())

    @app.route("/api/payroll/batches/<int:batch_id>/mapping", methods=["POST"], endpoint="payroll_mapping")
    @hr_required
    def payroll_mapping(batch_id: int):
        rules = json_body().get("rules") or {}
        if not isinstance(rules, dict):
            raise ValidationError("Reglas de mapeo no válidas")
        count = container.payroll_import_service.apply_mapping(batch_id, rules)
        return ok({"rows_created": count}, "Mapeo aplicado correctamente")

    @app.route("/api/payroll/batches/<int:batch_id>/rows", methods=["GET"], endpoint="payroll_rows")
    @hr_required
    def payroll_rows(batch_id: int):
        return ok(container.payroll_import_service.rows(batch_id))
