from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_field(value: Optional[str], field_name: str) -> date:
    """Like ``parse_iso_date`` but raises ``ValidationError`` naming the field."""
    try:
        return parse_iso_date((value or "").strip()[:10])
    except ValueError:
        raise ValidationError(f"{field_name} no es una fecha válida (YYYY-MM-DD)")


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value or not str(value).strip():
        return None
    return parse_date_field(str(value), field_name)


def parse_iso_datetime(value: str, field_name: str = "Fecha") -> datetime:
    try:
        return datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} no es una fecha/hora válida (ISO 8601)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easily.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) datetimes of a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Mes no válido")
    last = monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def format_minutes(minutes: int) -> str:
    """600 -> '10:00'."""
    minutes = int(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
