from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AnomalyEntityType, AnomalyStatus
from .model import AnomalyEvent, AnomalyReason


class AnomalyRepository(Protocol):
    def upsert(
        self,
        *,
        entity_type: AnomalyEntityType,
        entity_id: int,
        employee_id: Optional[int],
        score: int,
        reasons: Sequence[AnomalyReason],
    ) -> int:
        """Insert or replace the event of the entity; status goes back to OPEN."""
        raise NotImplementedError

    def get_by_id(self, anomaly_id: int) -> Optional[AnomalyEvent]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[AnomalyStatus] = None,
        entity_type: Optional[AnomalyEntityType] = None,
        employee_id: Optional[int] = None,
        limit: int = 100,
    ) -> Sequence[AnomalyEvent]:
        raise NotImplementedError

    def update_status(self, anomaly_id: int, status: AnomalyStatus) -> bool:
        raise NotImplementedError
