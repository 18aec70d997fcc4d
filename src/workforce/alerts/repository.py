from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AlertSeverity
from .model import Alert


class AlertRepository(Protocol):
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
        raise NotImplementedError

    def list(self, *, unresolved_only: bool = False, limit: int = 100) -> Sequence[Alert]:
        raise NotImplementedError

    def resolve(self, alert_id: int) -> bool:
        raise NotImplementedError
