from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AnomalyEntityType, AnomalyStatus


@dataclass(frozen=True)
class AnomalyReason:
    code: str
    message: str
    score: int


@dataclass(frozen=True)
class AnomalyEvent:
    """Suspicious record flagged for review; one per (entity_type, entity_id)."""

    anomaly_id: int
    entity_type: AnomalyEntityType
    entity_id: int
    employee_id: Optional[int]
    score: int
    reasons: list[AnomalyReason] = field(default_factory=list)
    status: AnomalyStatus = AnomalyStatus.OPEN
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None
