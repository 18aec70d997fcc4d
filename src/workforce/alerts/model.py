from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AlertSeverity


@dataclass(frozen=True)
class Alert:
    alert_id: int
    alert_type: str
    severity: AlertSeverity
    title: str
    message: str
    action_url: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_resolved: bool = False
    created_at: Optional[datetime] = None
