from __future__ import annotations

from datetime import date

import pytest

from tests.fakes import make_employee
from workforce.core.enums import EvaluationStatus
from workforce.core.exceptions import ConflictError, NotFoundError, ValidationError
from workforce.evaluations.model import Competency, EvaluationFilters
from workforce.evaluations.service import weighted_score

PERIOD = dict(period_start=date(2025, 1, 1), period_end=date(2025, 12, 31), due_date=date(2026, 1, 31))


def _template(container):
    return container.evaluation_service.create_template(
        name="Anual 2025",
        template_type="annual",
        competencies=[
            {"id": "team", "name": "Trabajo en equipo", "weight": 2},
            {"id": "quality", "name": "Calidad"},
        ],
    )


def _people(repos):
    repos.employees.add(make_employee(1))
    repos.employees.add(make_employee(2, manager_id=1))
    repos.employees.add(make_employee(3, manager_id=1))
    repos.employees.add(make_employee(4))


def test_weighted_score():
    comps = [Competency("a", "A", 2), Competency("b", "B", 1)]

    assert weighted_score(comps, {"a": 4, "b": 1}) == 3.0
    assert weighted_score(comps, {"a": 5}) == 3.33
    assert weighted_score([], {"a": 5}) is None


def test_template_needs_competencies(container):
    with pytest.raises(ValidationError):
        container.evaluation_service.create_template(name="Vacía", template_type="ANNUAL", competencies=[])
    with pytest.raises(ValidationError):
        container.evaluation_service.create_template(
            name="Mala", template_type="ANNUAL", competencies=[{"id": "x", "weight": -1}]
        )

    template = container.evaluation_service.get_template(_template(container))
    assert template.template_type == "ANNUAL"
    assert [c.weight for c in template.competencies] == [2.0, 1.0]


def test_full_workflow(container, repos, fixed_now):
    _people(repos)
    template_id = _template(container)
    evaluations = container.evaluation_service

    eid = evaluations.create(template_id=template_id, employee_id=2, evaluator_id=1, **PERIOD)

    draft = evaluations.update(eid, {"self_scores": {"team": "4"}})
    assert draft.status == EvaluationStatus.SELF_IN_PROGRESS

    submitted = evaluations.submit_self(eid, self_scores={"team": 4, "quality": 3}, strengths=" Puntual ")
    assert submitted.status == EvaluationStatus.MANAGER_IN_PROGRESS
    assert submitted.strengths == "Puntual"
    assert submitted.self_submitted_at == fixed_now
    with pytest.raises(ValidationError):
        evaluations.submit_self(eid, self_scores={"team": 5})

    with pytest.raises(ValidationError):
        evaluations.acknowledge(eid)

    done = evaluations.submit_manager(eid, manager_scores={"team": 5, "quality": 2}, manager_comments="Bien")
    assert done.status == EvaluationStatus.COMPLETED
    assert done.final_score == 4.0
    with pytest.raises(ValidationError):
        evaluations.submit_manager(eid, manager_scores={"team": 1})

    acked = evaluations.acknowledge(eid)
    assert acked.status == EvaluationStatus.ACKNOWLEDGED
    assert acked.acknowledged_at == fixed_now


def test_duplicate_period_and_bad_period(container, repos):
    _people(repos)
    template_id = _template(container)
    evaluations = container.evaluation_service
    evaluations.create(template_id=template_id, employee_id=2, evaluator_id=1, **PERIOD)

    with pytest.raises(ConflictError):
        evaluations.create(template_id=template_id, employee_id=2, evaluator_id=1, **PERIOD)
    with pytest.raises(ValidationError):
        evaluations.create(
            template_id=template_id,
            employee_id=3,
            evaluator_id=1,
            period_start=date(2025, 6, 1),
            period_end=date(2025, 1, 1),
            due_date=date(2025, 7, 1),
        )
    with pytest.raises(NotFoundError):
        evaluations.create(template_id=template_id, employee_id=3, evaluator_id=99, **PERIOD)


def test_bulk_uses_manager_and_skips_the_rest(container, repos):
    _people(repos)
    template_id = _template(container)
    evaluations = container.evaluation_service
    evaluations.create(template_id=template_id, employee_id=3, evaluator_id=1, **PERIOD)

    created = evaluations.create_bulk(template_id=template_id, employee_ids=[2, 3, 4, 42], **PERIOD)

    assert len(created) == 1
    assert evaluations.get(created[0]).evaluator_id == 1


def test_stats(container, repos):
    _people(repos)
    template_id = _template(container)
    evaluations = container.evaluation_service
    first = evaluations.create(template_id=template_id, employee_id=2, evaluator_id=1, **PERIOD)
    evaluations.create(template_id=template_id, employee_id=3, evaluator_id=1, **PERIOD)
    evaluations.submit_manager(first, manager_scores={"team": 3, "quality": 3})

    stats = evaluations.stats(EvaluationFilters())

    assert stats.total == 2
    assert stats.by_status == {"COMPLETED": 1, "DRAFT": 1}
    assert stats.average_score == 3.0
