from __future__ import annotations

from flask import Flask, request

from ..common.web import current_employee_id, current_role, hr_required, json_body, login_required, ok
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    anomalies = container.anomaly_service

    @app.route("/api/anomalies", methods=["GET"], endpoint="list_anomalies")
    @hr_required
    def list_anomalies():
        return ok(anomalies.list(status=request.args.get("status"), entity_type=request.args.get("entity_type")))

    @app.route("/api/anomalies/employee/<int:employee_id>", methods=["GET"], endpoint="employee_anomalies")
    @login_required
    def employee_anomalies(employee_id: int):
        if current_role() not in {Role.ADMIN, Role.HR} and current_employee_id() != employee_id:
            raise AuthorizationError("No tienes permisos")
        return ok(anomalies.list_for_employee(employee_id, status=request.args.get("status")))

    @app.route("/api/anomalies/<int:anomaly_id>/status", methods=["PUT"], endpoint="update_anomaly_status")
    @hr_required
    def update_anomaly_status(anomaly_id: int):
        event = anomalies.update_status(anomaly_id, json_body().get("status"))
        return ok(event, "Estado actualizado")
