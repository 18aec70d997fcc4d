from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import EvaluationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, dump_json, fetchall, fetchone, load_json, where_clause
from .model import Competency, Evaluation, EvaluationFilters, EvaluationTemplate
from .repository import EvaluationRepository, EvaluationTemplateRepository

_UPDATABLE = {
    "status",
    "self_scores",
    "manager_scores",
    "final_score",
    "strengths",
    "improvements",
    "manager_comments",
    "self_submitted_at",
    "manager_submitted_at",
    "acknowledged_at",
}
_JSON_COLUMNS = {"self_scores", "manager_scores"}


def _competencies(raw: Any) -> list[Competency]:
    out = []
    for c in load_json(raw, []) or []:
        if not isinstance(c, dict):
            continue
        out.append(
            Competency(
                competency_id=str(c.get("id")),
                name=str(c.get("name") or c.get("id")),
                weight=float(c.get("weight") or 1),
            )
        )
    return out


def _scores(raw: Any) -> dict[str, float]:
    data = load_json(raw, {}) or {}
    return {str(k): float(v) for k, v in data.items() if v is not None}


class MySQLEvaluationTemplateRepository(EvaluationTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _map(r: dict) -> EvaluationTemplate:
        return EvaluationTemplate(
            template_id=int(r["template_id"]),
            name=r["name"],
            template_type=r["template_type"],
            competencies=_competencies(r.get("competencies")),
        )

    def list_all(self) -> Sequence[EvaluationTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM evaluation_templates ORDER BY name")
            return [self._map(r) for r in fetchall(cur)]

    def get_by_id(self, template_id: int) -> Optional[EvaluationTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM evaluation_templates WHERE template_id=%s", (int(template_id),))
            r = fetchone(cur)
            return self._map(r) if r else None

    def create(self, *, name: str, template_type: str, competencies: Sequence[Competency]) -> int:
        payload = [{"id": c.competency_id, "name": c.name, "weight": c.weight} for c in competencies]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO evaluation_templates(name, template_type, competencies) VALUES(%s,%s,%s)",
                (name, template_type, dump_json(payload)),
            )
            return int(cur.lastrowid)


_SELECT = """
    SELECT ev.*, t.name AS template_name,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name,
           e.department AS employee_department,
           CONCAT(m.first_name, ' ', m.last_name) AS evaluator_name
    FROM evaluations ev
    JOIN evaluation_templates t ON t.template_id = ev.template_id
    JOIN employees e ON e.employee_id = ev.employee_id
    LEFT JOIN employees m ON m.employee_id = ev.evaluator_id
"""


class MySQLEvaluationRepository(EvaluationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _map(r: dict) -> Evaluation:
        final = r.get("final_score")
        return Evaluation(
            evaluation_id=int(r["evaluation_id"]),
            template_id=int(r["template_id"]),
            employee_id=int(r["employee_id"]),
            evaluator_id=int(r["evaluator_id"]),
            period_start=r["period_start"],
            period_end=r["period_end"],
            due_date=r["due_date"],
            status=EvaluationStatus(r["status"]),
            self_scores=_scores(r.get("self_scores")),
            manager_scores=_scores(r.get("manager_scores")),
            final_score=as_float(final) if final is not None else None,
            strengths=r.get("strengths"),
            improvements=r.get("improvements"),
            manager_comments=r.get("manager_comments"),
            self_submitted_at=r.get("self_submitted_at"),
            manager_submitted_at=r.get("manager_submitted_at"),
            acknowledged_at=r.get("acknowledged_at"),
            template_name=r.get("template_name"),
            employee_name=r.get("employee_name"),
            employee_department=r.get("employee_department"),
            evaluator_name=r.get("evaluator_name"),
        )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO evaluations(template_id, employee_id, evaluator_id, period_start, period_end, due_date, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(template_id),
                    int(employee_id),
                    int(evaluator_id),
                    period_start,
                    period_end,
                    due_date,
                    EvaluationStatus.DRAFT.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, evaluation_id: int) -> Optional[Evaluation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE ev.evaluation_id=%s", (int(evaluation_id),))
            r = fetchone(cur)
            return self._map(r) if r else None

    def find_for_period(
        self, *, employee_id: int, template_id: int, period_start: date, period_end: date
    ) -> Optional[Evaluation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE ev.employee_id=%s AND ev.template_id=%s AND ev.period_start=%s AND ev.period_end=%s",
                (int(employee_id), int(template_id), period_start, period_end),
            )
            r = fetchone(cur)
            return self._map(r) if r else None

    def list(self, filters: EvaluationFilters) -> Sequence[Evaluation]:
        clauses: list[str] = []
        params: list[Any] = []
        if filters.employee_id is not None:
            clauses.append("ev.employee_id=%s")
            params.append(int(filters.employee_id))
        if filters.evaluator_id is not None:
            clauses.append("ev.evaluator_id=%s")
            params.append(int(filters.evaluator_id))
        if filters.status is not None:
            clauses.append("ev.status=%s")
            params.append(filters.status.value)
        if filters.template_id is not None:
            clauses.append("ev.template_id=%s")
            params.append(int(filters.template_id))
        if filters.period_start is not None:
            clauses.append("ev.period_start >= %s")
            params.append(filters.period_start)
        if filters.period_end is not None:
            clauses.append("ev.period_end <= %s")
            params.append(filters.period_end)
        if filters.department:
            clauses.append("e.department=%s")
            params.append(filters.department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where_clause(clauses)} ORDER BY ev.due_date ASC, ev.evaluation_id ASC",
                tuple(params),
            )
            return [self._map(r) for r in fetchall(cur)]

    def update(self, evaluation_id: int, changes: dict[str, Any]) -> bool:
        columns = [c for c in changes if c in _UPDATABLE]
        if not columns:
            return False
        values = []
        for c in columns:
            v = changes[c]
            if c in _JSON_COLUMNS:
                v = dump_json(v)
            elif c == "status" and isinstance(v, EvaluationStatus):
                v = v.value
            values.append(v)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE evaluations SET {assignments} WHERE evaluation_id=%s",
                (*values, int(evaluation_id)),
            )
            return cur.rowcount > 0
