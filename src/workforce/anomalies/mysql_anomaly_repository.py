from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AnomalyEntityType, AnomalyStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, where_clause
from .model import AnomalyEvent, AnomalyReason
from .repository import AnomalyRepository

_SELECT = """
    SELECT a.anomaly_id, a.entity_type, a.entity_id, a.employee_id, a.score, a.reasons, a.status, a.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM anomaly_events a
    LEFT JOIN employees e ON e.employee_id = a.employee_id
"""


def _row_to_event(row: dict) -> AnomalyEvent:
    return AnomalyEvent(
        anomaly_id=int(row["anomaly_id"]),
        entity_type=AnomalyEntityType(row["entity_type"]),
        entity_id=int(row["entity_id"]),
        employee_id=row.get("employee_id"),
        score=int(row["score"]),
        reasons=[
            AnomalyReason(code=r.get("code", ""), message=r.get("message", ""), score=int(r.get("score", 0)))
            for r in load_json(row.get("reasons"), [])
        ],
        status=AnomalyStatus(row["status"]),
        created_at=row.get("created_at"),
        employee_name=row.get("employee_name"),
    )


class MySQLAnomalyRepository(AnomalyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        entity_type: AnomalyEntityType,
        entity_id: int,
        employee_id: Optional[int],
        score: int,
        reasons: Sequence[AnomalyReason],
    ) -> int:
        payload = dump_json([{"code": r.code, "message": r.message, "score": r.score} for r in reasons])
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid the existing id on update
            cur.execute(
                """
                INSERT INTO anomaly_events(entity_type, entity_id, employee_id, score, reasons, status)
                VALUES(%s,%s,%s,%s,%s,'OPEN')
                ON DUPLICATE KEY UPDATE
                    anomaly_id = LAST_INSERT_ID(anomaly_id),
                    employee_id = VALUES(employee_id),
                    score = VALUES(score),
                    reasons = VALUES(reasons),
                    status = 'OPEN'
                """,
                (entity_type.value, int(entity_id), employee_id, int(score), payload),
            )
            return int(cur.lastrowid)

    def get_by_id(self, anomaly_id: int) -> Optional[AnomalyEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.anomaly_id=%s", (int(anomaly_id),))
            row = fetchone(cur)
            return _row_to_event(row) if row else None

    def list(
        self,
        *,
        status: Optional[AnomalyStatus] = None,
        entity_type: Optional[AnomalyEntityType] = None,
        employee_id: Optional[int] = None,
        limit: int = 100,
    ) -> Sequence[AnomalyEvent]:
        clauses: list[str] = []
        params: list = []
        if status is not None:
            clauses.append("a.status=%s")
            params.append(status.value)
        if entity_type is not None:
            clauses.append("a.entity_type=%s")
            params.append(entity_type.value)
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))
        sql = _SELECT + f" WHERE {where_clause(clauses)} ORDER BY a.created_at DESC, a.anomaly_id DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (*params, int(limit)))
            return [_row_to_event(r) for r in fetchall(cur)]

    def update_status(self, anomaly_id: int, status: AnomalyStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE anomaly_events SET status=%s WHERE anomaly_id=%s", (status.value, int(anomaly_id)))
            return cur.rowcount > 0
