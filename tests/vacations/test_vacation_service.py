from __future__ import annotations

from datetime import date

import pytest

from tests.fakes import make_employee
from workforce.core.enums import RequestStatus, Role, VacationType
from workforce.core.exceptions import AuthorizationError, ConflictError, ValidationError


def _request(container, *, role=Role.EMPLOYEE, employee_id=1, start, end, vacation_type=VacationType.VACATION):
    return container.vacation_service.create(
        current_role=role,
        current_user_id=50,
        current_employee_id=1,
        employee_id=employee_id,
        start_date=start,
        end_date=end,
        vacation_type=vacation_type,
        reason="Viaje",
    )


def test_employee_request_is_pending_and_counts_business_days(container, repos):
    repos.employees.add(make_employee(1))

    vid = _request(container, start=date(2025, 4, 14), end=date(2025, 4, 25))

    vac = repos.vacations.get_by_id(vid)
    assert vac.status == RequestStatus.PENDING
    assert vac.business_days == 7
    balance = container.vacation_service.balance(1, 2025)
    assert (balance.used, balance.pending, balance.available) == (0, 7, 23)


def test_hr_request_is_auto_approved(container, repos, fixed_now):
    repos.employees.add(make_employee(2))

    vid = _request(container, role=Role.HR, employee_id=2, start=date(2025, 5, 5), end=date(2025, 5, 9))

    vac = repos.vacations.get_by_id(vid)
    assert vac.status == RequestStatus.APPROVED
    assert vac.decided_by == 50
    assert vac.decided_at == fixed_now


def test_employee_cannot_request_for_someone_else(container, repos):
    repos.employees.add(make_employee(2))

    with pytest.raises(AuthorizationError):
        _request(container, employee_id=2, start=date(2025, 5, 5), end=date(2025, 5, 9))


def test_overlap_is_rejected_but_rejected_requests_do_not_block(container, repos):
    repos.employees.add(make_employee(1))
    first = _request(container, start=date(2025, 5, 5), end=date(2025, 5, 9))

    with pytest.raises(ConflictError):
        _request(container, start=date(2025, 5, 9), end=date(2025, 5, 12))

    container.vacation_service.reject(current_role=Role.HR, user_id=50, vacation_id=first)
    assert _request(container, start=date(2025, 5, 9), end=date(2025, 5, 12))


def test_quota_exceeded(container, repos):
    repos.employees.add(make_employee(1, vacation_days_total=3))

    with pytest.raises(ValidationError):
        _request(container, start=date(2025, 5, 5), end=date(2025, 5, 9))

    # sick leave does not consume the quota
    assert _request(container, start=date(2025, 5, 5), end=date(2025, 5, 9), vacation_type=VacationType.SICK_LEAVE)


def test_decide_only_once_and_only_hr(container, repos):
    repos.employees.add(make_employee(1))
    vid = _request(container, start=date(2025, 5, 5), end=date(2025, 5, 9))

    with pytest.raises(AuthorizationError):
        container.vacation_service.approve(current_role=Role.EMPLOYEE, user_id=50, vacation_id=vid)

    container.vacation_service.approve(current_role=Role.ADMIN, user_id=50, vacation_id=vid)
    with pytest.raises(ValidationError):
        container.vacation_service.reject(current_role=Role.ADMIN, user_id=50, vacation_id=vid)

    # approved requests can no longer be cancelled by the employee
    with pytest.raises(ValidationError):
        container.vacation_service.delete(current_role=Role.EMPLOYEE, current_employee_id=1, vacation_id=vid)
