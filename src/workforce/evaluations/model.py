from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import EvaluationStatus


@dataclass(frozen=True)
class Competency:
    competency_id: str
    name: str
    weight: float = 1.0


@dataclass(frozen=True)
class EvaluationTemplate:
    template_id: int
    name: str
    template_type: str
    competencies: list[Competency] = field(default_factory=list)


@dataclass(frozen=True)
class Evaluation:
    evaluation_id: int
    template_id: int
    employee_id: int
    evaluator_id: int
    period_start: date
    period_end: date
    due_date: date
    status: EvaluationStatus = EvaluationStatus.DRAFT
    self_scores: dict[str, float] = field(default_factory=dict)
    manager_scores: dict[str, float] = field(default_factory=dict)
    final_score: Optional[float] = None
    strengths: Optional[str] = None
    improvements: Optional[str] = None
    manager_comments: Optional[str] = None
    self_submitted_at: Optional[datetime] = None
    manager_submitted_at: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None
    template_name: Optional[str] = None
    employee_name: Optional[str] = None
    employee_department: Optional[str] = None
    evaluator_name: Optional[str] = None


@dataclass(frozen=True)
class EvaluationFilters:
    employee_id: Optional[int] = None
    evaluator_id: Optional[int] = None
    status: Optional[EvaluationStatus] = None
    template_id: Optional[int] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class EvaluationStats:
    total: int
    by_status: dict[str, int]
    average_score: float
