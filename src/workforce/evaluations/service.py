from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text, require_non_empty
from ..core.enums import EvaluationStatus
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Competency, Evaluation, EvaluationFilters, EvaluationStats, EvaluationTemplate
from .repository import EvaluationRepository, EvaluationTemplateRepository

log = get_logger("evaluations")


def weighted_score(competencies: Sequence[Competency], scores: Mapping[str, float]) -> Optional[float]:
    """Σ(score·weight) / Σweight over the template competencies; missing scores count as 0."""

    total_score = 0.0
    total_weight = 0.0
    for comp in competencies:
        weight = comp.weight or 1
        total_score += float(scores.get(comp.competency_id) or 0) * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return round(total_score / total_weight, 2)


def _clean_scores(raw: Any, field_name: str) -> dict[str, float]:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{field_name} no válidas")
    out = {}
    for key, value in raw.items():
        try:
            out[str(key)] = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name}: puntuación no válida para {key}")
    return out


class EvaluationService:
    def __init__(
        self,
        evaluations: EvaluationRepository,
        templates: EvaluationTemplateRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._evaluations = evaluations
        self._templates = templates
        self._employees = employees
        self._clock = clock

    # templates

    def list_templates(self) -> Sequence[EvaluationTemplate]:
        return self._templates.list_all()

    def get_template(self, template_id: int) -> EvaluationTemplate:
        template = self._templates.get_by_id(int(template_id))
        if not template:
            raise NotFoundError("Plantilla no encontrada")
        return template

    def create_template(self, *, name: str, template_type: str, competencies: Sequence[Mapping[str, Any]]) -> int:
        name = require_non_empty(name, "Nombre")
        parsed = []
        for c in competencies or []:
            comp_id = str(c.get("id") or "").strip()
            if not comp_id:
                raise ValidationError("Cada competencia necesita un id")
            try:
                weight = float(c.get("weight") or 1)
            except (TypeError, ValueError):
                raise ValidationError(f"Peso no válido para {comp_id}")
            if weight <= 0:
                raise ValidationError(f"Peso no válido para {comp_id}")
            parsed.append(Competency(competency_id=comp_id, name=str(c.get("name") or comp_id), weight=weight))
        if not parsed:
            raise ValidationError("La plantilla necesita al menos una competencia")
        return self._templates.create(name=name, template_type=(template_type or "ANNUAL").upper(), competencies=parsed)

    # evaluations

    def get(self, evaluation_id: int) -> Evaluation:
        ev = self._evaluations.get_by_id(int(evaluation_id))
        if not ev:
            raise NotFoundError("Evaluación no encontrada")
        return ev

    def list(self, filters: EvaluationFilters) -> Sequence[Evaluation]:
        return self._evaluations.list(filters)

    def create(
        self,
        *,
        template_id: int,
        employee_id: int,
        evaluator_id: int,
        period_start: date,
        period_end: date,
        due_date: date,
    ) -> int:
        self.get_template(template_id)
        if period_end < period_start:
            raise ValidationError("El fin del periodo debe ser posterior al inicio")
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Empleado no encontrado")
        if not self._employees.get_by_id(int(evaluator_id)):
            raise NotFoundError("Evaluador no encontrado")
        if self._evaluations.find_for_period(
            employee_id=int(employee_id), template_id=int(template_id), period_start=period_start, period_end=period_end
        ):
            raise ConflictError("Ya existe una evaluación para este período")

        return self._evaluations.create(
            template_id=int(template_id),
            employee_id=int(employee_id),
            evaluator_id=int(evaluator_id),
            period_start=period_start,
            period_end=period_end,
            due_date=due_date,
        )

    def create_bulk(
        self,
        *,
        template_id: int,
        employee_ids: Sequence[int],
        period_start: date,
        period_end: date,
        due_date: date,
    ) -> list[int]:
        """One evaluation per employee with their manager as evaluator.

        Employees without a manager are skipped, and so are individual failures.
        """

        self.get_template(template_id)
        created: list[int] = []
        for employee_id in employee_ids:
            emp = self._employees.get_by_id(int(employee_id))
            if not emp or not emp.manager_id:
                continue
            try:
                created.append(
                    self.create(
                        template_id=template_id,
                        employee_id=emp.employee_id,
                        evaluator_id=emp.manager_id,
                        period_start=period_start,
                        period_end=period_end,
                        due_date=due_date,
                    )
                )
            except DomainError as exc:
                log.error("Error creating evaluation for employee %s: %s", emp.employee_id, exc)
        log.info("Bulk evaluations: %s of %s created", len(created), len(employee_ids))
        return created

    def update(self, evaluation_id: int, changes: Mapping[str, Any]) -> Evaluation:
        ev = self.get(evaluation_id)
        update: dict[str, Any] = {}

        for text_field in ("strengths", "improvements", "manager_comments"):
            if text_field in changes:
                update[text_field] = optional_text(changes.get(text_field))

        if changes.get("self_scores") is not None:
            update["self_scores"] = _clean_scores(changes["self_scores"], "Autoevaluación")
            if ev.status == EvaluationStatus.DRAFT:
                update["status"] = EvaluationStatus.SELF_IN_PROGRESS

        if changes.get("manager_scores") is not None:
            scores = _clean_scores(changes["manager_scores"], "Evaluación del responsable")
            update["manager_scores"] = scores
            template = self._templates.get_by_id(ev.template_id)
            if template:
                final = weighted_score(template.competencies, scores)
                if final is not None:
                    update["final_score"] = final

        if update:
            self._evaluations.update(ev.evaluation_id, update)
        return self.get(ev.evaluation_id)

    def submit_self(
        self,
        evaluation_id: int,
        *,
        self_scores: Mapping[str, Any],
        strengths: Optional[str] = None,
        improvements: Optional[str] = None,
    ) -> Evaluation:
        ev = self.get(evaluation_id)
        if ev.status not in {EvaluationStatus.DRAFT, EvaluationStatus.SELF_IN_PROGRESS}:
            raise ValidationError("La autoevaluación ya fue enviada")
        self._evaluations.update(
            ev.evaluation_id,
            {
                "self_scores": _clean_scores(self_scores, "Autoevaluación"),
                "strengths": optional_text(strengths),
                "improvements": optional_text(improvements),
                "self_submitted_at": self._clock(),
                "status": EvaluationStatus.MANAGER_IN_PROGRESS,
            },
        )
        return self.get(ev.evaluation_id)

    def submit_manager(
        self, evaluation_id: int, *, manager_scores: Mapping[str, Any], manager_comments: Optional[str] = None
    ) -> Evaluation:
        ev = self.get(evaluation_id)
        if ev.status in {EvaluationStatus.COMPLETED, EvaluationStatus.ACKNOWLEDGED}:
            raise ValidationError("La evaluación ya está completada")
        template = self.get_template(ev.template_id)
        scores = _clean_scores(manager_scores, "Evaluación del responsable")

        self._evaluations.update(
            ev.evaluation_id,
            {
                "manager_scores": scores,
                "manager_comments": optional_text(manager_comments),
                "final_score": weighted_score(template.competencies, scores) or 0.0,
                "manager_submitted_at": self._clock(),
                "status": EvaluationStatus.COMPLETED,
            },
        )
        return self.get(ev.evaluation_id)

    def acknowledge(self, evaluation_id: int) -> Evaluation:
        ev = self.get(evaluation_id)
        if ev.status != EvaluationStatus.COMPLETED:
            raise ValidationError("Solo se pueden confirmar evaluaciones completadas")
        self._evaluations.update(
            ev.evaluation_id, {"acknowledged_at": self._clock(), "status": EvaluationStatus.ACKNOWLEDGED}
        )
        return self.get(ev.evaluation_id)

    def stats(self, filters: EvaluationFilters) -> EvaluationStats:
        items = self._evaluations.list(filters)
        by_status: dict[str, int] = {}
        for ev in items:
            by_status[ev.status.value] = by_status.get(ev.status.value, 0) + 1
        scored = [ev.final_score for ev in items if ev.final_score is not None]
        average = round(sum(scored) / len(scored), 2) if scored else 0.0
        return EvaluationStats(total=len(items), by_status=by_status, average_score=average)
