from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .anomalies.mysql_anomaly_repository import MySQLAnomalyRepository
from .anomalies.repository import AnomalyRepository
from .anomalies.service import AnomalyService
from .alerts.mysql_alert_repository import MySQLAlertRepository
from .alerts.repository import AlertRepository
from .alerts.service import AlertService
from .calendar.mysql_calendar_repository import MySQLCalendarEventRepository
from .calendar.repository import CalendarEventRepository
from .calendar.service import CalendarService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_VACATION_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.repository import DocumentRepository
from .documents.service import DocumentService, DocumentSettings
from .employees.company_repository import CompanyRepository
from .employees.importer import EmployeeImporter
from .employees.lifecycle import OffboardingService, OnboardingService
from .employees.mysql_company_repository import MySQLCompanyRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .evaluations.mysql_evaluation_repository import MySQLEvaluationRepository, MySQLEvaluationTemplateRepository
from .evaluations.repository import EvaluationRepository, EvaluationTemplateRepository
from .evaluations.service import EvaluationService
from .holidays.calendar import HolidayCalendar
from .inventory.asset_repository import AssetRepository
from .inventory.mysql_asset_repository import MySQLAssetRepository
from .inventory.mysql_inventory_repository import MySQLInventoryRepository
from .inventory.repository import InventoryRepository
from .inventory.service import InventoryService
from .overtime.importer import OvertimeImporter
from .overtime.mysql_overtime_repository import MySQLCategoryRateRepository, MySQLOvertimeRepository
from .overtime.repository import CategoryRateRepository, OvertimeRepository
from .overtime.service import OvertimeService
from .payroll.importer import PayrollImportService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollReportService
from .storage.service import LocalStorage
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.repository import VacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    companies: CompanyRepository
    employees: EmployeeRepository
    vacations: VacationRepository
    calendar_events: CalendarEventRepository
    time_entries: TimeEntryRepository
    rates: CategoryRateRepository
    overtime: OvertimeRepository
    inventory: InventoryRepository
    assets: AssetRepository
    alerts: AlertRepository
    documents: DocumentRepository
    payroll: PayrollRepository
    evaluation_templates: EvaluationTemplateRepository
    evaluations: EvaluationRepository
    anomalies: AnomalyRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories
    storage: LocalStorage
    holiday_calendar: HolidayCalendar

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    employee_importer: EmployeeImporter
    vacation_service: VacationService
    calendar_service: CalendarService
    time_entry_service: TimeEntryService
    overtime_service: OvertimeService
    overtime_importer: OvertimeImporter
    alert_service: AlertService
    inventory_service: InventoryService
    document_service: DocumentService
    offboarding_service: OffboardingService
    onboarding_service: OnboardingService
    payroll_report_service: PayrollReportService
    payroll_import_service: PayrollImportService
    evaluation_service: EvaluationService
    anomaly_service: AnomalyService

    conn: Optional[DatabaseConnection] = None


def assemble(
    repos: Repositories,
    *,
    storage: LocalStorage,
    holiday_calendar: HolidayCalendar,
    document_settings: DocumentSettings,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
    default_vacation_days: int = DEFAULT_VACATION_DAYS,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""

    alert_service = AlertService(repos.alerts)
    employee_service = EmployeeService(repos.employees, repos.companies, default_vacation_days=default_vacation_days)
    anomaly_service = AnomalyService(
        repos.anomalies, repos.time_entries, repos.vacations, repos.employees, repos.companies, clock=clock
    )
    vacation_service = VacationService(
        repos.vacations, repos.employees, holiday_calendar, anomalies=anomaly_service, clock=clock
    )
    calendar_service = CalendarService(
        repos.calendar_events, repos.vacations, repos.employees, holiday_calendar, clock=clock
    )
    time_entry_service = TimeEntryService(repos.time_entries, repos.employees, anomalies=anomaly_service, clock=clock)
    overtime_service = OvertimeService(repos.overtime, repos.rates, repos.employees)
    overtime_importer = OvertimeImporter(
        repos.employees, repos.overtime, overtime_service, time_entry_service, holiday_calendar
    )
    inventory_service = InventoryService(repos.inventory, repos.assets, alert_service, repos.employees, clock=clock)
    document_service = DocumentService(
        repos.documents, repos.employees, inventory_service, storage, document_settings, clock=clock
    )

    return Container(
        repos=repos,
        storage=storage,
        holiday_calendar=holiday_calendar,
        auth_service=AuthService(repos.users),
        user_service=UserService(repos.users),
        employee_service=employee_service,
        employee_importer=EmployeeImporter(employee_service),
        vacation_service=vacation_service,
        calendar_service=calendar_service,
        time_entry_service=time_entry_service,
        overtime_service=overtime_service,
        overtime_importer=overtime_importer,
        alert_service=alert_service,
        inventory_service=inventory_service,
        document_service=document_service,
        offboarding_service=OffboardingService(repos.employees, inventory_service, repos.vacations, clock=clock),
        onboarding_service=OnboardingService(repos.employees, document_service),
        payroll_report_service=PayrollReportService(time_entry_service, overtime_service),
        payroll_import_service=PayrollImportService(repos.payroll, repos.employees, storage, clock=clock),
        evaluation_service=EvaluationService(repos.evaluations, repos.evaluation_templates, repos.employees, clock=clock),
        anomaly_service=anomaly_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    repos = Repositories(
        users=MySQLUserRepository(conn),
        companies=MySQLCompanyRepository(conn),
        employees=MySQLEmployeeRepository(conn),
        vacations=MySQLVacationRepository(conn),
        calendar_events=MySQLCalendarEventRepository(conn),
        time_entries=MySQLTimeEntryRepository(conn),
        rates=MySQLCategoryRateRepository(conn),
        overtime=MySQLOvertimeRepository(conn),
        inventory=MySQLInventoryRepository(conn),
        assets=MySQLAssetRepository(conn),
        alerts=MySQLAlertRepository(conn),
        documents=MySQLDocumentRepository(conn),
        payroll=MySQLPayrollRepository(conn),
        evaluation_templates=MySQLEvaluationTemplateRepository(conn),
        evaluations=MySQLEvaluationRepository(conn),
        anomalies=MySQLAnomalyRepository(conn),
    )

    return assemble(
        repos,
        storage=LocalStorage(getattr(settings, "STORAGE_DIR", "uploads")),
        holiday_calendar=HolidayCalendar.from_setting(getattr(settings, "HOLIDAY_EXTRA_DATES", "")),
        document_settings=DocumentSettings(
            company_city=getattr(settings, "COMPANY_CITY", ""),
            signatory_name=getattr(settings, "SIGNATORY_NAME", ""),
            model_145_template=getattr(settings, "MODEL_145_TEMPLATE", "templates/modelo145.pdf"),
            logo_path=getattr(settings, "LOGO_PATH", None),
        ),
        conn=conn,
        default_vacation_days=getattr(settings, "DEFAULT_VACATION_DAYS", DEFAULT_VACATION_DAYS),
    )
