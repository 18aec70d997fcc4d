from __future__ import annotations

from datetime import date, datetime

import pytest

from tests.fakes import make_employee
from workforce.calendar.model import CalendarEventData
from workforce.core.enums import RequestStatus, Role, VacationType
from workforce.core.exceptions import AuthorizationError


def _vacation(repos, employee_id, start, end, status=RequestStatus.APPROVED):
    return repos.vacations.create(
        employee_id=employee_id,
        start_date=start,
        end_date=end,
        vacation_type=VacationType.VACATION,
        status=status,
        business_days=1,
        reason=None,
    )


def test_unified_events_merge_all_sources(container, repos):
    repos.employees.add(make_employee(1, birth_date=date(1990, 3, 20)))
    repos.employees.add(make_employee(2))
    _vacation(repos, 1, date(2025, 3, 10), date(2025, 3, 11))
    _vacation(repos, 2, date(2025, 3, 17), date(2025, 3, 18))
    _vacation(repos, 2, date(2025, 3, 24), date(2025, 3, 25), status=RequestStatus.PENDING)
    container.calendar_service.create_event(
        current_role=Role.HR,
        user_id=50,
        data=CalendarEventData(title="Formación PRL", start_date=datetime(2025, 3, 5, 10), end_date=datetime(2025, 3, 5, 12), all_day=False),
    )

    events = container.calendar_service.unified_events(
        current_role=Role.HR, current_employee_id=1, company_id=None, start=date(2025, 3, 1), end=date(2025, 3, 31)
    )

    types = [e.type for e in events]
    assert types.count("vacation-own") == 1
    assert types.count("vacation-team") == 1
    assert "birthday" in types
    assert "event" in types
    assert events[0].id == "holiday-2025-03-01"
    birthday = next(e for e in events if e.type == "birthday")
    assert birthday.title.endswith("(35)")


def test_employees_do_not_see_birthdays(container, repos):
    repos.employees.add(make_employee(1, birth_date=date(1990, 3, 20)))

    events = container.calendar_service.unified_events(
        current_role=Role.EMPLOYEE, current_employee_id=1, company_id=None, start=date(2025, 3, 2), end=date(2025, 3, 31)
    )

    assert events == []


def test_leap_day_birthday_shown_on_28_february(container, repos, fixed_now):
    repos.employees.add(make_employee(1, birth_date=date(2000, 2, 29)))

    birthdays = container.calendar_service.birthdays(company_id=None, month=2)

    assert [b.start for b in birthdays] == [date(fixed_now.year, 2, 28)]


def test_only_hr_manages_events(container):
    with pytest.raises(AuthorizationError):
        container.calendar_service.create_event(
            current_role=Role.EMPLOYEE,
            user_id=1,
            data=CalendarEventData(title="Fiesta", start_date=datetime(2025, 3, 5), end_date=datetime(2025, 3, 5)),
        )
