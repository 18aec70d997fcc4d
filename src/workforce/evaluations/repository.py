from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import Competency, Evaluation, EvaluationFilters, EvaluationTemplate


class EvaluationTemplateRepository(Protocol):
    def list_all(self) -> Sequence[EvaluationTemplate]:
        raise NotImplementedError

    def get_by_id(self, template_id: int) -> Optional[EvaluationTemplate]:
        raise NotImplementedError

    def create(self, *, name: str, template_type: str, competencies: Sequence[Competency]) -> int:
        raise NotImplementedError


class EvaluationRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, evaluation_id: int) -> Optional[Evaluation]:
        raise NotImplementedError

    def find_for_period(
        self, *, employee_id: int, template_id: int, period_start: date, period_end: date
    ) -> Optional[Evaluation]:
        raise NotImplementedError

    def list(self, filters: EvaluationFilters) -> Sequence[Evaluation]:
        raise NotImplementedError

    def update(self, evaluation_id: int, changes: dict[str, Any]) -> bool:
        """Set the given columns (score dicts are stored as JSON)."""
        raise NotImplementedError
