from __future__ import annotations

from datetime import date, datetime

import pytest

from tests.fakes import make_employee
from workforce.core.enums import TimeEntryType
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.time_entries.model import NewPunch


def _clock(container, kind, hh, mm, day=date(2025, 3, 12)):
    return container.time_entry_service.clock(1, kind, now=datetime.combine(day, datetime.min.time()).replace(hour=hh, minute=mm))


def test_full_day_follows_allowed_transitions(container, repos):
    repos.employees.add(make_employee(1))

    _clock(container, TimeEntryType.IN, 8, 0)
    _clock(container, TimeEntryType.LUNCH_START, 13, 0)
    _clock(container, TimeEntryType.LUNCH_END, 13, 45)
    _clock(container, TimeEntryType.OUT, 17, 15)

    [day] = container.time_entry_service.day_summaries(1, date(2025, 3, 12), date(2025, 3, 12))
    assert day.worked_minutes == 5 * 60 + 3 * 60 + 30
    assert day.lunch_minutes == 45
    assert day.complete is True
    assert day.first_in == datetime(2025, 3, 12, 8, 0)


def test_out_of_order_punches_are_rejected(container, repos):
    repos.employees.add(make_employee(1))

    with pytest.raises(ValidationError, match="entrada primero"):
        _clock(container, TimeEntryType.OUT, 8, 0)

    _clock(container, TimeEntryType.IN, 8, 0)
    with pytest.raises(ValidationError):
        _clock(container, TimeEntryType.IN, 8, 5)
    with pytest.raises(ValidationError):
        _clock(container, TimeEntryType.LUNCH_END, 9, 0)


def test_second_shift_after_out_is_allowed(container, repos):
    repos.employees.add(make_employee(1))
    _clock(container, TimeEntryType.IN, 8, 0)
    _clock(container, TimeEntryType.OUT, 12, 0)
    _clock(container, TimeEntryType.IN, 18, 0)

    summary = container.time_entry_service.month_summary(1, 2025, 3)
    assert summary.total_hours == 4.0
    assert summary.days_incomplete == 1


def test_inactive_or_missing_employee_cannot_clock(container, repos):
    repos.employees.add(make_employee(1, is_active=False))

    with pytest.raises(ValidationError):
        _clock(container, TimeEntryType.IN, 8, 0)
    with pytest.raises(NotFoundError):
        container.time_entry_service.clock(7, TimeEntryType.IN)


def test_clock_uses_injected_time(container, repos, fixed_now):
    repos.employees.add(make_employee(1))

    entry_id = container.time_entry_service.clock(1, TimeEntryType.IN, location="Oficina")

    assert repos.time_entries.get_by_id(entry_id).punched_at == fixed_now


def test_replace_day_rejects_punches_from_other_days(container):
    with pytest.raises(ValidationError):
        container.time_entry_service.replace_day(
            1, date(2025, 3, 12), [NewPunch(entry_type=TimeEntryType.IN, punched_at=datetime(2025, 3, 13, 8, 0))]
        )
