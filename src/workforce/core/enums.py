from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class RequestStatus(str, Enum):
    """Approval workflow state (vacations, overtime)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class VacationType(str, Enum):
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"


class TimeEntryType(str, Enum):
    """Kind of time-clock punch (fichaje)."""

    IN = "IN"
    LUNCH_START = "LUNCH_START"
    LUNCH_END = "LUNCH_END"
    OUT = "OUT"


class MovementType(str, Enum):
    ENTRY = "ENTRY"
    ASSIGNMENT = "ASSIGNMENT"
    RETURN = "RETURN"
    ADJUSTMENT = "ADJUSTMENT"


class AssetStatus(str, Enum):
    ASSIGNED = "ASSIGNED"
    RETURNED = "RETURNED"


class AssetCategory(str, Enum):
    UNIFORM = "UNIFORM"
    EPI = "EPI"
    TECH = "TECH"
    OTHER = "OTHER"


class AlertSeverity(str, Enum):
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class DocumentCategory(str, Enum):
    CONTRACT = "CONTRACT"
    PRL = "PRL"
    PAYROLL = "PAYROLL"
    OTHER = "OTHER"


class DocumentKind(str, Enum):
    """Value of the ``t`` key in the QR / PDF subject metadata."""

    UNIFORM = "UNIFORME"
    EPI = "EPI"
    TECH_DEVICE = "TECH_DEVICE"
    MODEL_145 = "MODEL_145"


class EvaluationStatus(str, Enum):
    DRAFT = "DRAFT"
    SELF_IN_PROGRESS = "SELF_IN_PROGRESS"
    MANAGER_IN_PROGRESS = "MANAGER_IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ACKNOWLEDGED = "ACKNOWLEDGED"


class PayrollBatchStatus(str, Enum):
    UPLOADED = "UPLOADED"
    MAPPED = "MAPPED"


class AnomalyStatus(str, Enum):
    OPEN = "OPEN"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    FALSE_POSITIVE = "FALSE_POSITIVE"


class AnomalyEntityType(str, Enum):
    TIME_ENTRY = "TIME_ENTRY"
    VACATION = "VACATION"
