"""Rule-based scoring of suspicious punches and absences.

Each rule adds a reason with a weight; the event score is the capped sum.
Events are upserted per record, so re-scoring a record replaces its event.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import parse_enum
from ..core import constants as c
from ..core.enums import AnomalyEntityType, AnomalyStatus, RequestStatus, TimeEntryType
from ..core.exceptions import NotFoundError
from ..employees.company_repository import CompanyRepository
from ..employees.repository import EmployeeRepository
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..vacations.model import Vacation
from ..vacations.repository import VacationRepository
from .model import AnomalyEvent, AnomalyReason
from .repository import AnomalyRepository

log = get_logger("anomalies")

EARTH_RADIUS_M = 6371e3


def minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def median_minutes(values: Sequence[int]) -> int:
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    # halves round up
    return math.floor((ordered[mid - 1] + ordered[mid]) / 2 + 0.5)


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle (haversine) distance in metres."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def total_score(reasons: Sequence[AnomalyReason]) -> int:
    return min(c.ANOMALY_MAX_SCORE, sum(r.score for r in reasons))


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


class AnomalyService:
    def __init__(
        self,
        anomalies: AnomalyRepository,
        time_entries: TimeEntryRepository,
        vacations: VacationRepository,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._anomalies = anomalies
        self._time_entries = time_entries
        self._vacations = vacations
        self._employees = employees
        self._companies = companies
        self._clock = clock

    # detection

    def time_entry_reasons(
        self, entry: TimeEntry, *, latitude: Optional[float] = None, longitude: Optional[float] = None
    ) -> list[AnomalyReason]:
        reasons: list[AnomalyReason] = []
        at = entry.punched_at

        if at.hour < c.ANOMALY_DAY_START_HOUR or at.hour > c.ANOMALY_DAY_END_HOUR:
            reasons.append(
                AnomalyReason(
                    "OFF_HOURS",
                    f"Fichaje fuera del horario habitual "
                    f"({c.ANOMALY_DAY_START_HOUR:02d}:00-{c.ANOMALY_DAY_END_HOUR:02d}:00).",
                    20,
                )
            )

        window = timedelta(minutes=c.ANOMALY_DUPLICATE_MINUTES)
        recent = [
            e
            for e in self._time_entries.list_range(
                start=at - window, end=at + timedelta(seconds=1), employee_id=entry.employee_id
            )
            if e.entry_id != entry.entry_id
        ]
        if recent and recent[-1].entry_type == entry.entry_type:
            reasons.append(
                AnomalyReason(
                    "DUPLICATE_ENTRY",
                    f"Fichaje repetido con el mismo tipo en menos de {c.ANOMALY_DUPLICATE_MINUTES} minutos.",
                    15,
                )
            )

        if entry.entry_type == TimeEntryType.IN:
            history = [
                e
                for e in self._time_entries.list_range(
                    start=at - timedelta(days=c.ANOMALY_HISTORY_DAYS),
                    end=at + timedelta(seconds=1),
                    employee_id=entry.employee_id,
                )
                if e.entry_type == TimeEntryType.IN
            ][-c.ANOMALY_HISTORY_SIZE:]
            same_weekday = [minutes_of_day(e.punched_at) for e in history if e.punched_at.weekday() == at.weekday()]
            if len(same_weekday) >= c.ANOMALY_PATTERN_MIN_SAMPLES:
                usual = median_minutes(same_weekday)
                if abs(minutes_of_day(at) - usual) > c.ANOMALY_PATTERN_TOLERANCE_MINUTES:
                    reasons.append(
                        AnomalyReason("OUT_OF_PATTERN", "Fichaje de entrada fuera del patrón habitual (+/- 2h).", 20)
                    )

        if _finite(latitude) and _finite(longitude):
            reason = self._geofence_reason(entry.employee_id, float(latitude), float(longitude))
            if reason:
                reasons.append(reason)

        return reasons

    def _geofence_reason(self, employee_id: int, latitude: float, longitude: float) -> Optional[AnomalyReason]:
        emp = self._employees.get_by_id(employee_id)
        if not emp or emp.company_id is None:
            return None
        company = self._companies.get_by_id(emp.company_id)
        if not company or not company.has_office_location:
            return None

        distance = distance_m(latitude, longitude, company.office_latitude, company.office_longitude)
        if distance <= company.allowed_radius:
            return None
        return AnomalyReason(
            "GEOFENCE",
            f"Fichaje fuera del radio permitido ({round(distance)}m > {company.allowed_radius}m).",
            25,
        )

    def detect_time_entry(
        self, entry: TimeEntry, *, latitude: Optional[float] = None, longitude: Optional[float] = None
    ) -> Optional[int]:
        reasons = self.time_entry_reasons(entry, latitude=latitude, longitude=longitude)
        return self._record(AnomalyEntityType.TIME_ENTRY, entry.entry_id, entry.employee_id, reasons)

    def vacation_reasons(self, vacation: Vacation) -> list[AnomalyReason]:
        reasons: list[AnomalyReason] = []
        today = self._clock().date()
        history = self._vacations.list(employee_id=vacation.employee_id)

        # Monday or Friday
        if vacation.start_date.weekday() in (0, 4):
            since = today - timedelta(days=c.ANOMALY_HISTORY_DAYS)
            others = [v for v in history if v.vacation_id != vacation.vacation_id and v.start_date >= since]
            if len(others) >= 2:
                reasons.append(AnomalyReason("PATTERN_MF", "Ausencias recurrentes en lunes/viernes.", 20))

        recent_since = today - timedelta(days=c.ANOMALY_RECENT_ABSENCE_DAYS)
        recent = [v for v in history if v.start_date >= recent_since and v.status != RequestStatus.REJECTED]
        if len(recent) >= 3:
            reasons.append(
                AnomalyReason(
                    "FREQUENT_ABSENCE",
                    f"Alta frecuencia de ausencias en los últimos {c.ANOMALY_RECENT_ABSENCE_DAYS} días.",
                    20,
                )
            )

        if vacation.business_days > c.ANOMALY_LONG_ABSENCE_DAYS:
            reasons.append(
                AnomalyReason(
                    "LONG_ABSENCE",
                    f"Ausencia de larga duración (>{c.ANOMALY_LONG_ABSENCE_DAYS} días laborables).",
                    15,
                )
            )
        return reasons

    def detect_vacation(self, vacation: Vacation) -> Optional[int]:
        reasons = self.vacation_reasons(vacation)
        return self._record(AnomalyEntityType.VACATION, vacation.vacation_id, vacation.employee_id, reasons)

    def _record(
        self, entity_type: AnomalyEntityType, entity_id: int, employee_id: Optional[int], reasons: list[AnomalyReason]
    ) -> Optional[int]:
        if not reasons:
            return None
        score = total_score(reasons)
        anomaly_id = self._anomalies.upsert(
            entity_type=entity_type, entity_id=entity_id, employee_id=employee_id, score=score, reasons=reasons
        )
        log.warning(
            "Anomaly %s on %s %s (score %s): %s",
            anomaly_id,
            entity_type.value,
            entity_id,
            score,
            ",".join(r.code for r in reasons),
        )
        return anomaly_id

    # review

    def list(self, *, status=None, entity_type=None) -> Sequence[AnomalyEvent]:
        return self._anomalies.list(
            status=parse_enum(AnomalyStatus, status, "Estado") if status else None,
            entity_type=parse_enum(AnomalyEntityType, entity_type, "Tipo") if entity_type else None,
            limit=c.DEFAULT_HISTORY_LIMIT,
        )

    def list_for_employee(self, employee_id: int, *, status=None) -> Sequence[AnomalyEvent]:
        return self._anomalies.list(
            employee_id=int(employee_id),
            status=parse_enum(AnomalyStatus, status, "Estado") if status else None,
            limit=c.DEFAULT_HISTORY_LIMIT,
        )

    def update_status(self, anomaly_id: int, status) -> AnomalyEvent:
        status = parse_enum(AnomalyStatus, status, "Estado")
        if not self._anomalies.get_by_id(int(anomaly_id)):
            raise NotFoundError("Anomalía no encontrada")
        self._anomalies.update_status(int(anomaly_id), status)
        return self._anomalies.get_by_id(int(anomaly_id))
