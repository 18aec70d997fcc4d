from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_date_field, parse_optional_date
from ..common.validators import parse_enum
from ..common.web import current_employee_id, current_role, hr_required, json_body, login_required, ok
from ..core.enums import EvaluationStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import Evaluation, EvaluationFilters


def _is_hr() -> bool:
    return current_role() in {Role.ADMIN, Role.HR}


def _int_arg(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Parámetro no válido: {name}")


def _filters() -> EvaluationFilters:
    status = request.args.get("status")
    return EvaluationFilters(
        employee_id=_int_arg("employee_id"),
        evaluator_id=_int_arg("evaluator_id"),
        status=parse_enum(EvaluationStatus, status, "Estado") if status else None,
        template_id=_int_arg("template_id"),
        period_start=parse_optional_date(request.args.get("period_start"), "Inicio del periodo"),
        period_end=parse_optional_date(request.args.get("period_end"), "Fin del periodo"),
        department=request.args.get("department") or None,
    )


def _check_participant(ev: Evaluation) -> None:
    if _is_hr():
        return
    if current_employee_id() not in {ev.employee_id, ev.evaluator_id}:
        raise AuthorizationError("No tienes permisos")


def register(app: Flask, container: Container) -> None:
    evaluations = container.evaluation_service

    @app.route("/api/evaluations/templates", methods=["GET"], endpoint="evaluation_templates")
    @login_required
    def evaluation_templates():
        return ok(evaluations.list_templates())

    @app.route("/api/evaluations/templates/<int:template_id>", methods=["GET"], endpoint="evaluation_template")
    @login_required
    def evaluation_template(template_id: int):
        return ok(evaluations.get_template(template_id))

    @app.route("/api/evaluations/templates", methods=["POST"], endpoint="create_evaluation_template")
    @hr_required
    def create_evaluation_template():
        body = json_body()
        template_id = evaluations.create_template(
            name=body.get("name", ""),
            template_type=body.get("type") or "ANNUAL",
            competencies=body.get("competencies") or [],
        )
        return ok({"template_id": template_id}, "Plantilla creada", 201)

    @app.route("/api/evaluations", methods=["GET"], endpoint="list_evaluations")
    @login_required
    def list_evaluations():
        filters = _filters()
        if not _is_hr():
            own = current_employee_id()
            if own is None:
                return ok([])
            # own evaluations plus the ones this employee has to fill as manager
            mine = evaluations.list(EvaluationFilters(employee_id=own, status=filters.status))
            as_manager = evaluations.list(EvaluationFilters(evaluator_id=own, status=filters.status))
            seen = {ev.evaluation_id for ev in mine}
            return ok(list(mine) + [ev for ev in as_manager if ev.evaluation_id not in seen])
        return ok(evaluations.list(filters))

    @app.route("/api/evaluations/stats", methods=["GET"], endpoint="evaluation_stats")
    @hr_required
    def evaluation_stats():
        return ok(evaluations.stats(_filters()))

    @app.route("/api/evaluations/<int:evaluation_id>", methods=["GET"], endpoint="get_evaluation")
    @login_required
    def get_evaluation(evaluation_id: int):
        ev = evaluations.get(evaluation_id)
        _check_participant(ev)
        return ok(ev)

    @app.route("/api/evaluations", methods=["POST"], endpoint="create_evaluation")
    @hr_required
    def create_evaluation():
        body = json_body()
        try:
            template_id = int(body.get("template_id"))
            employee_id = int(body.get("employee_id"))
            evaluator_id = int(body.get("evaluator_id"))
        except (TypeError, ValueError):
            raise ValidationError("Plantilla, empleado y evaluador son obligatorios")
        evaluation_id = evaluations.create(
            template_id=template_id,
            employee_id=employee_id,
            evaluator_id=evaluator_id,
            period_start=parse_date_field(body.get("period_start"), "Inicio del periodo"),
            period_end=parse_date_field(body.get("period_end"), "Fin del periodo"),
            due_date=parse_date_field(body.get("due_date"), "Fecha límite"),
        )
        return ok({"evaluation_id": evaluation_id}, "Evaluación creada", 201)

    @app.route("/api/evaluations/bulk", methods=["POST"], endpoint="create_bulk_evaluations")
    @hr_required
    def create_bulk_evaluations():
        body = json_body()
        try:
            template_id = int(body.get("template_id"))
            employee_ids = [int(i) for i in body.get("employee_ids") or []]
        except (TypeError, ValueError):
            raise ValidationError("Plantilla y empleados son obligatorios")
        created = evaluations.create_bulk(
            template_id=template_id,
            employee_ids=employee_ids,
            period_start=parse_date_field(body.get("period_start"), "Inicio del periodo"),
            period_end=parse_date_field(body.get("period_end"), "Fin del periodo"),
            due_date=parse_date_field(body.get("due_date"), "Fecha límite"),
        )
        return ok({"evaluation_ids": created}, f"{len(created)} evaluaciones creadas", 201)

    @app.route("/api/evaluations/<int:evaluation_id>", methods=["PUT"], endpoint="update_evaluation")
    @login_required
    def update_evaluation(evaluation_id: int):
        ev = evaluations.get(evaluation_id)
        _check_participant(ev)
        body = json_body()
        if not _is_hr():
            # employees edit their own side only
            own = current_employee_id()
            allowed = set()
            if own == ev.employee_id:
                allowed |= {"self_scores", "strengths", "improvements"}
            if own == ev.evaluator_id:
                allowed |= {"manager_scores", "manager_comments"}
            body = {k: v for k, v in body.items() if k in allowed}
        return ok(evaluations.update(evaluation_id, body), "Evaluación actualizada")

    @app.route("/api/evaluations/<int:evaluation_id>/submit-self", methods=["POST"], endpoint="submit_self_evaluation")
    @login_required
    def submit_self_evaluation(evaluation_id: int):
        ev = evaluations.get(evaluation_id)
        if not _is_hr() and current_employee_id() != ev.employee_id:
            raise AuthorizationError("No tienes permisos")
        body = json_body()
        updated = evaluations.submit_self(
            evaluation_id,
            self_scores=body.get("self_scores") or {},
            strengths=body.get("strengths"),
            improvements=body.get("improvements"),
        )
        return ok(updated, "Autoevaluación enviada")

    @app.route(
        "/api/evaluations/<int:evaluation_id>/submit-manager", methods=["POST"], endpoint="submit_manager_evaluation"
    )
    @login_required
    def submit_manager_evaluation(evaluation_id: int):
        ev = evaluations.get(evaluation_id)
        if not _is_hr() and current_employee_id() != ev.evaluator_id:
            raise AuthorizationError("No tienes permisos")
        body = json_body()
        updated = evaluations.submit_manager(
            evaluation_id, manager_scores=body.get("manager_scores") or {}, manager_comments=body.get("manager_comments")
        )
        return ok(updated, "Evaluación completada")

    @app.route("/api/evaluations/<int:evaluation_id>/acknowledge", methods=["POST"], endpoint="acknowledge_evaluation")
    @login_required
    def acknowledge_evaluation(evaluation_id: int):
        ev = evaluations.get(evaluation_id)
        if not _is_hr() and current_employee_id() != ev.employee_id:
            raise AuthorizationError("No tienes permisos")
        return ok(evaluations.acknowledge(evaluation_id), "Evaluación confirmada")
