from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.logging_config import get_logger
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AlertSeverity
from ..core.exceptions import NotFoundError
from .model import Alert
from .repository import AlertRepository

log = get_logger("alerts")


class AlertService:
    def __init__(self, alerts: AlertRepository):
        self._alerts = alerts

    def raise_alert(
        self,
        *,
        alert_type: str,
        severity: AlertSeverity,
        title: str,
        message: str,
        action_url: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> int:
        alert_id = self._alerts.create(
            alert_type=alert_type,
            severity=severity,
            title=title,
            message=message,
            action_url=action_url,
            metadata=metadata or {},
        )
        log.warning("Alert %s [%s] %s", alert_id, severity.value, message)
        return alert_id

    def list(self, *, unresolved_only: bool = False) -> Sequence[Alert]:
        return self._alerts.list(unresolved_only=unresolved_only, limit=DEFAULT_HISTORY_LIMIT)

    def resolve(self, alert_id: int) -> None:
        if not self._alerts.resolve(int(alert_id)):
            raise NotFoundError("Alerta no encontrada")
