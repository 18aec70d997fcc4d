from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.calendar import HolidayCalendar
from ..vacations.repository import VacationRepository
from .model import CalendarEvent, CalendarEventData, UnifiedEvent
from .repository import CalendarEventRepository

COLOR_VACATION_OWN = "#22c55e"
COLOR_VACATION_TEAM = "#86efac"
COLOR_BIRTHDAY = "#ec4899"
COLOR_EVENT = "#3b82f6"
COLOR_HOLIDAY = "#6b7280"

_HR_ROLES = {Role.ADMIN, Role.HR}


def _birthday_in_year(birth_date: date, year: int) -> date:
    try:
        return birth_date.replace(year=year)
    except ValueError:
        # born on 29 February
        return date(year, 2, 28)


def _sort_key(event: UnifiedEvent) -> datetime:
    start = event.start
    if isinstance(start, datetime):
        return start
    return datetime.combine(start, time.min)


class CalendarService:
    def __init__(
        self,
        events: CalendarEventRepository,
        vacations: VacationRepository,
        employees: EmployeeRepository,
        holidays: HolidayCalendar,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._vacations = vacations
        self._employees = employees
        self._holidays = holidays
        self._clock = clock

    def _birthday_events(self, employees: Sequence[Employee], start: date, end: date) -> list[UnifiedEvent]:
        out: list[UnifiedEvent] = []
        for emp in employees:
            if not emp.birth_date:
                continue
            for year in range(start.year, end.year + 1):
                day = _birthday_in_year(emp.birth_date, year)
                if not start <= day <= end:
                    continue
                age = year - emp.birth_date.year
                out.append(
                    UnifiedEvent(
                        id=f"birthday-{emp.employee_id}-{year}",
                        title=f"{emp.full_name} ({age})",
                        start=day,
                        end=day,
                        all_day=True,
                        type="birthday",
                        color=COLOR_BIRTHDAY,
                        employee_id=emp.employee_id,
                        employee_name=emp.full_name,
                    )
                )
        return out

    def unified_events(
        self,
        *,
        current_role: Role,
        current_employee_id: Optional[int],
        company_id: Optional[int],
        start: date,
        end: date,
    ) -> list[UnifiedEvent]:
        if end < start:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")

        events: list[UnifiedEvent] = []

        company_employees: Optional[set[int]] = None
        if company_id is not None:
            company_employees = {e.employee_id for e in self._employees.list(company_id=company_id, active=None)}

        for vac in self._vacations.list(status=RequestStatus.APPROVED, start=start, end=end):
            if company_employees is not None and vac.employee_id not in company_employees:
                continue
            own = current_employee_id is not None and vac.employee_id == int(current_employee_id)
            name = vac.employee_name or ""
            events.append(
                UnifiedEvent(
                    id=f"vacation-{vac.vacation_id}",
                    title="Vacaciones" if own else f"{name} - Vacaciones",
                    description=vac.reason,
                    start=vac.start_date,
                    end=vac.end_date,
                    all_day=True,
                    type="vacation-own" if own else "vacation-team",
                    color=COLOR_VACATION_OWN if own else COLOR_VACATION_TEAM,
                    employee_id=vac.employee_id,
                    employee_name=name or None,
                )
            )

        if current_role in _HR_ROLES:
            active = self._employees.list(company_id=company_id, active=True)
            events.extend(self._birthday_events(active, start, end))

        range_start = datetime.combine(start, time.min)
        range_end = datetime.combine(end, time.max)
        for ev in self._events.list_in_range(start=range_start, end=range_end, company_id=company_id):
            is_holiday = ev.event_type == "HOLIDAY"
            events.append(
                UnifiedEvent(
                    id=f"event-{ev.event_id}",
                    title=ev.title,
                    description=ev.description,
                    location=ev.location,
                    start=ev.start_date,
                    end=ev.end_date,
                    all_day=ev.all_day,
                    type="holiday" if is_holiday else "event",
                    color=ev.color or (COLOR_HOLIDAY if is_holiday else COLOR_EVENT),
                )
            )

        for year in range(start.year, end.year + 1):
            for day, name in self._holidays.holidays_for_year(year):
                if start <= day <= end:
                    events.append(
                        UnifiedEvent(
                            id=f"holiday-{day.isoformat()}",
                            title=name,
                            start=day,
                            end=day,
                            all_day=True,
                            type="holiday",
                            color=COLOR_HOLIDAY,
                        )
                    )

        events.sort(key=_sort_key)
        return events

    def birthdays(self, *, company_id: Optional[int], month: Optional[int] = None) -> list[UnifiedEvent]:
        today = self._clock().date()
        first, last = month_bounds(today.year, int(month or today.month))
        active = self._employees.list(company_id=company_id, active=True)
        out = self._birthday_events(active, first, last)
        out.sort(key=_sort_key)
        return out

    @staticmethod
    def _validate(data: CalendarEventData) -> CalendarEventData:
        require_non_empty(data.title, "Título")
        if data.end_date < data.start_date:
            raise ValidationError("La fecha de fin debe ser posterior o igual a la de inicio")
        return CalendarEventData(
            title=data.title.strip(),
            start_date=data.start_date,
            end_date=data.end_date,
            all_day=data.all_day,
            event_type=(data.event_type or "EVENT").upper(),
            description=optional_text(data.description),
            location=optional_text(data.location),
            color=optional_text(data.color),
            company_id=data.company_id,
            is_public=data.is_public,
        )

    def create_event(self, *, current_role: Role, user_id: int, data: CalendarEventData) -> int:
        if current_role not in _HR_ROLES:
            raise AuthorizationError("No tienes permisos")
        return self._events.create(self._validate(data), created_by=int(user_id))

    def update_event(self, *, current_role: Role, event_id: int, data: CalendarEventData) -> None:
        if current_role not in _HR_ROLES:
            raise AuthorizationError("No tienes permisos")
        if not self._events.get_by_id(int(event_id)):
            raise NotFoundError("Evento no encontrado")
        self._events.update(int(event_id), self._validate(data))

    def delete_event(self, *, current_role: Role, event_id: int) -> None:
        if current_role not in _HR_ROLES:
            raise AuthorizationError("No tienes permisos")
        if not self._events.delete(int(event_id)):
            raise NotFoundError("Evento no encontrado")

    def get_event(self, event_id: int) -> CalendarEvent:
        ev = self._events.get_by_id(int(event_id))
        if not ev:
            raise NotFoundError("Evento no encontrado")
        return ev
