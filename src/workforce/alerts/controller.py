from __future__ import annotations

from flask import Flask, request

from ..common.web import hr_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/alerts", methods=["GET"], endpoint="list_alerts")
    @hr_required
    def list_alerts():
        unresolved = (request.args.get("unresolved") or "").lower() in {"1", "true", "yes"}
        return ok(container.alert_service.list(unresolved_only=unresolved))

    @app.route("/api/alerts/<int:alert_id>/resolve", methods=["POST"], endpoint="resolve_alert")
    @hr_required
    def resolve_alert(alert_id: int):
        container.alert_service.resolve(alert_id)
        return ok(message="Alerta resuelta")
