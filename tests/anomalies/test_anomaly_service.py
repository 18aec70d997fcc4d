from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from tests.fakes import make_employee
from workforce.anomalies.service import distance_m, median_minutes
from workforce.core.enums import AnomalyEntityType, AnomalyStatus, Role, TimeEntryType, VacationType
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.time_entries.service import TimeEntryService

OFFICE = (39.569600, 2.650160)


def _codes(event):
    return [r.code for r in event.reasons]


def _absence(container, start, end, vacation_type=VacationType.PERSONAL):
    return container.vacation_service.create(
        current_role=Role.HR,
        current_user_id=9,
        current_employee_id=None,
        employee_id=1,
        start_date=start,
        end_date=end,
        vacation_type=vacation_type,
    )


def test_median_and_distance():
    assert median_minutes([]) == 0
    assert median_minutes([600, 480, 490]) == 490
    assert median_minutes([480, 490, 500, 530]) == 495
    assert median_minutes([480, 481]) == 481

    assert distance_m(*OFFICE, *OFFICE) == 0
    # 0.01 degrees of latitude is about 1.1 km
    assert 1100 < distance_m(*OFFICE, OFFICE[0] + 0.01, OFFICE[1]) < 1125


def test_punch_inside_working_hours_is_not_flagged(container, repos):
    repos.employees.add(make_employee(1))

    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 9, 30))

    assert repos.anomalies.items == {}


def test_off_hours_punch_is_flagged(container, repos):
    repos.employees.add(make_employee(1))

    entry_id = container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 4, 30))

    [event] = container.anomaly_service.list()
    assert event.entity_type == AnomalyEntityType.TIME_ENTRY
    assert event.entity_id == entry_id
    assert event.employee_id == 1
    assert event.status == AnomalyStatus.OPEN
    assert _codes(event) == ["OFF_HOURS"]
    assert event.score == 20


def test_repeated_check_in_across_midnight_is_a_duplicate(container, repos):
    repos.employees.add(make_employee(1))

    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 11, 23, 55))
    second = container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 0, 5))

    event = next(a for a in container.anomaly_service.list() if a.entity_id == second)
    assert _codes(event) == ["OFF_HOURS", "DUPLICATE_ENTRY"]
    assert event.score == 35


def test_check_in_far_from_usual_time_is_out_of_pattern(container, repos):
    repos.employees.add(make_employee(1))
    for weeks in range(1, 6):
        repos.time_entries.create(
            employee_id=1,
            entry_type=TimeEntryType.IN,
            punched_at=datetime(2025, 3, 12, 8, 0) - timedelta(weeks=weeks),
            location=None,
            device=None,
        )

    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 9, 45))
    assert repos.anomalies.items == {}

    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 19, 11, 30))
    [event] = container.anomaly_service.list_for_employee(1)
    assert _codes(event) == ["OUT_OF_PATTERN"]


def test_punch_outside_office_radius_is_flagged(container, repos):
    cid = repos.companies.create(
        name="Hotel Sol", cif="B12345678", office_latitude=OFFICE[0], office_longitude=OFFICE[1], allowed_radius=100
    )
    repos.employees.add(make_employee(1, company_id=cid))

    container.time_entry_service.clock(
        1, TimeEntryType.IN, now=datetime(2025, 3, 12, 9, 0), latitude=OFFICE[0] + 0.0005, longitude=OFFICE[1]
    )
    assert repos.anomalies.items == {}

    container.time_entry_service.clock(
        1, TimeEntryType.LUNCH_START, now=datetime(2025, 3, 12, 13, 0), latitude=OFFICE[0] + 0.01, longitude=OFFICE[1]
    )
    [event] = container.anomaly_service.list()
    assert _codes(event) == ["GEOFENCE"]
    assert event.score == 25
    assert "m > 100m" in event.reasons[0].message


def test_punch_without_office_location_is_not_geofenced(container, repos):
    cid = repos.companies.create(name="Hotel Sol", cif="B12345678")
    repos.employees.add(make_employee(1, company_id=cid))

    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 9, 0), latitude=0.0, longitude=0.0)

    assert repos.anomalies.items == {}


def test_failed_scoring_keeps_the_punch(repos):
    class FailingScorer:
        def detect_time_entry(self, entry, **kwargs):
            raise RuntimeError("scoring down")

    repos.employees.add(make_employee(1))
    service = TimeEntryService(repos.time_entries, repos.employees, anomalies=FailingScorer())

    entry_id = service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 8, 0))

    assert repos.time_entries.get_by_id(entry_id).entry_type == TimeEntryType.IN


def test_long_absence_is_flagged(container, repos):
    repos.employees.add(make_employee(1))

    vid = _absence(container, date(2025, 6, 2), date(2025, 6, 16), VacationType.VACATION)

    [event] = container.anomaly_service.list(entity_type="vacation")
    assert event.entity_id == vid
    assert _codes(event) == ["LONG_ABSENCE"]


def test_frequent_monday_friday_absences_are_flagged(container, repos):
    repos.employees.add(make_employee(1))

    _absence(container, date(2025, 3, 17), date(2025, 3, 17))
    _absence(container, date(2025, 3, 21), date(2025, 3, 21))
    assert repos.anomalies.items == {}

    third = _absence(container, date(2025, 3, 24), date(2025, 3, 24))

    [event] = container.anomaly_service.list()
    assert event.entity_id == third
    assert _codes(event) == ["PATTERN_MF", "FREQUENT_ABSENCE"]
    assert event.score == 40


def test_update_status(container, repos):
    repos.employees.add(make_employee(1))
    container.time_entry_service.clock(1, TimeEntryType.IN, now=datetime(2025, 3, 12, 23, 30))
    [event] = container.anomaly_service.list()

    updated = container.anomaly_service.update_status(event.anomaly_id, "reviewed")

    assert updated.status == AnomalyStatus.REVIEWED
    assert container.anomaly_service.list(status="OPEN") == []
    with pytest.raises(NotFoundError):
        container.anomaly_service.update_status(999, "RESOLVED")
    with pytest.raises(ValidationError):
        container.anomaly_service.update_status(event.anomaly_id, "IGNORED")
