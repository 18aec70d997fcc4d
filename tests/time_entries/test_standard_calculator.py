from datetime import datetime

from workforce.core.enums import TimeEntryType
from workforce.time_entries.calculator.standard_calculator import StandardWorkedTimeCalculator
from workforce.time_entries.model import TimeEntry


def _entry(entry_id, kind, hh, mm):
    return TimeEntry(entry_id=entry_id, employee_id=1, entry_type=kind, punched_at=datetime(2025, 1, 2, hh, mm))


def test_standard_calculator_subtracts_lunch():
    entries = [
        _entry(4, TimeEntryType.OUT, 17, 0),
        _entry(1, TimeEntryType.IN, 8, 0),
        _entry(3, TimeEntryType.LUNCH_END, 14, 0),
        _entry(2, TimeEntryType.LUNCH_START, 13, 0),
    ]

    totals = StandardWorkedTimeCalculator().day_totals(entries)

    assert totals.worked_minutes == 8 * 60
    assert totals.lunch_minutes == 60
    assert totals.complete is True


def test_open_interval_is_not_counted():
    totals = StandardWorkedTimeCalculator().day_totals(
        [_entry(1, TimeEntryType.IN, 8, 0), _entry(2, TimeEntryType.LUNCH_START, 12, 0)]
    )

    assert totals.worked_minutes == 4 * 60
    assert totals.complete is False


def test_empty_day_is_incomplete():
    totals = StandardWorkedTimeCalculator().day_totals([])

    assert (totals.worked_minutes, totals.lunch_minutes, totals.complete) == (0, 0, False)
