from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .alerts.controller import register as register_alerts
from .anomalies.controller import register as register_anomalies
from .calendar.controller import register as register_calendar
from .common.logging_config import get_logger, setup_logging
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .documents.controller import register as register_documents
from .employees.controller import register as register_employees
from .evaluations.controller import register as register_evaluations
from .holidays.controller import register as register_holidays
from .inventory.controller import register as register_inventory
from .overtime.controller import register as register_overtime
from .payroll.controller import register as register_payroll
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users
from .vacations.controller import register as register_vacations

REPO_ROOT = Path(__file__).resolve().parents[2]

log = get_logger("app")


def register_routes(app: Flask, container: Container) -> None:
    register_users(app, container)
    register_employees(app, container)
    register_holidays(app, container)
    register_vacations(app, container)
    register_calendar(app, container)
    register_time_entries(app, container)
    register_overtime(app, container)
    register_inventory(app, container)
    register_alerts(app, container)
    register_documents(app, container)
    register_payroll(app, container)
    register_evaluations(app, container)
    register_anomalies(app, container)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_MB", 20)) * 1024 * 1024
    app.json.ensure_ascii = False

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), bool(getattr(settings, "LOG_JSON", False)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        log.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            log.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            log.info("Demo seed ready")

        container = build_container(db_config=db_config, settings=settings)

    app.extensions["workforce.container"] = container
    register_error_handlers(app)
    register_routes(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return {"success": True, "status": "ok"}

    return app
