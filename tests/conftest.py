from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import fake_repositories, fixed_clock
from workforce.container import assemble
from workforce.documents.service import DocumentSettings
from workforce.holidays.calendar import HolidayCalendar
from workforce.storage.service import LocalStorage


@pytest.fixture
def fixed_now() -> datetime:
    # a Wednesday, outside any holiday
    return datetime(2025, 3, 12, 9, 30, 0)


@pytest.fixture
def repos():
    return fake_repositories()


@pytest.fixture
def container(repos, tmp_path, fixed_now):
    clock = fixed_clock(fixed_now)
    return assemble(
        repos,
        storage=LocalStorage(tmp_path / "uploads", clock=clock),
        holiday_calendar=HolidayCalendar(),
        document_settings=DocumentSettings(
            company_city="Palma de Mallorca",
            signatory_name="Firmante Pruebas",
            model_145_template=str(tmp_path / "modelo145.pdf"),
        ),
        clock=clock,
    )
