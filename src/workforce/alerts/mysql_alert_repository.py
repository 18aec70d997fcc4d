from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import AlertSeverity
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import Alert
from .repository import AlertRepository


class MySQLAlertRepository(AlertRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        alert_type: str,
        severity: AlertSeverity,
        title: str,
        message: str,
        action_url: Optional[str],
        metadata: dict[str, Any],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO alerts(alert_type, severity, title, message, action_url, metadata)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (alert_type, severity.value, title, message, action_url, dump_json(metadata)),
            )
            return int(cur.lastrowid)

    def list(self, *, unresolved_only: bool = False, limit: int = 100) -> Sequence[Alert]:
        sql = """
            SELECT alert_id, alert_type, severity, title, message, action_url, metadata, is_resolved, created_at
            FROM alerts
        """
        if unresolved_only:
            sql += " WHERE is_resolved = 0"
        sql += " ORDER BY created_at DESC, alert_id DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(limit),))
            return [
                Alert(
                    alert_id=int(r["alert_id"]),
                    alert_type=r["alert_type"],
                    severity=AlertSeverity(r["severity"]),
                    title=r["title"],
                    message=r["message"],
                    action_url=r.get("action_url"),
                    metadata=load_json(r.get("metadata"), {}),
                    is_resolved=bool(r.get("is_resolved")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def resolve(self, alert_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE alerts SET is_resolved = 1 WHERE alert_id=%s", (int(alert_id),))
            return cur.rowcount > 0
