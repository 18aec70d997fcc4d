"""Holiday calendar for the Balearic Islands.

Fixed national dates, regional dates, Easter-relative dates and any local
``MM-DD`` dates configured per deployment.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import iter_days
from ..core.exceptions import ValidationError

NATIONAL_HOLIDAYS: dict[str, str] = {
    "01-01": "Año Nuevo",
    "01-06": "Epifanía del Señor",
    "05-01": "Fiesta del Trabajo",
    "08-15": "Asunción de la Virgen",
    "10-12": "Fiesta Nacional de España",
    "11-01": "Todos los Santos",
    "12-06": "Día de la Constitución",
    "12-08": "Inmaculada Concepción",
    "12-25": "Navidad",
}

REGIONAL_HOLIDAYS: dict[str, str] = {
    "03-01": "Día de las Illes Balears",
    "12-26": "Segunda fiesta de Navidad",
}

# offset in days from Easter Sunday
EASTER_RELATIVE_HOLIDAYS: tuple[tuple[int, str], ...] = (
    (-3, "Jueves Santo"),
    (-2, "Viernes Santo"),
    (1, "Lunes de Pascua"),
)


def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday (anonymous Meeus/Jones/Butcher algorithm)."""

    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def _parse_month_day(value: str) -> str:
    raw = (value or "").strip()
    try:
        month, day = (int(part) for part in raw.split("-"))
        # 2000 is a leap year, so 02-29 is accepted
        date(2000, month, day)
    except ValueError:
        raise ValidationError(f"Festivo local no válido (MM-DD): {value}")
    return f"{month:02d}-{day:02d}"


class HolidayCalendar:
    def __init__(self, extra_fixed: Iterable[str] = ()):
        self._local = tuple(_parse_month_day(v) for v in extra_fixed if v and v.strip())
        self._cache: dict[int, dict[date, str]] = {}

    @classmethod
    def from_setting(cls, value: Optional[str]) -> "HolidayCalendar":
        """Build from a comma separated ``MM-DD`` setting such as ``"01-20,09-12"``."""
        return cls((value or "").split(","))

    def _year_map(self, year: int) -> dict[date, str]:
        cached = self._cache.get(year)
        if cached is not None:
            return cached

        out: dict[date, str] = {}
        for md, name in {**NATIONAL_HOLIDAYS, **REGIONAL_HOLIDAYS}.items():
            month, day = (int(p) for p in md.split("-"))
            out[date(year, month, day)] = name

        easter = easter_sunday(year)
        for offset, name in EASTER_RELATIVE_HOLIDAYS:
            out.setdefault(easter + timedelta(days=offset), name)

        for md in self._local:
            month, day = (int(p) for p in md.split("-"))
            try:
                out.setdefault(date(year, month, day), "Festivo local")
            except ValueError:
                # 02-29 outside leap years
                continue

        self._cache[year] = out
        return out

    def holidays_for_year(self, year: int) -> list[tuple[date, str]]:
        return sorted(self._year_map(int(year)).items())

    def is_holiday(self, day: date) -> bool:
        return day in self._year_map(day.year)

    def holiday_name(self, day: date) -> Optional[str]:
        return self._year_map(day.year).get(day)

    def is_business_day(self, day: date) -> bool:
        return day.weekday() < 5 and not self.is_holiday(day)

    def is_premium_day(self, day: date) -> bool:
        """Weekend or holiday: overtime is paid at the holiday rate."""
        return day.weekday() >= 5 or self.is_holiday(day)

    def business_days_count(self, start: date, end: date) -> int:
        if end < start:
            return 0
        return sum(1 for d in iter_days(start, end) if self.is_business_day(d))
