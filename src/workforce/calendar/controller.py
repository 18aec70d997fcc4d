from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_date_field, parse_iso_datetime
from ..common.web import current_employee_id, current_role, current_user_id, hr_required, json_body, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container
from .model import CalendarEventData


def _optional_int_arg(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Parámetro no válido: {name}")


def _event_data(body: dict) -> CalendarEventData:
    company_id = body.get("company_id")
    return CalendarEventData(
        title=str(body.get("title") or ""),
        start_date=parse_iso_datetime(body.get("start_date") or "", "Fecha de inicio"),
        end_date=parse_iso_datetime(body.get("end_date") or "", "Fecha de fin"),
        all_day=bool(body.get("all_day", True)),
        event_type=str(body.get("type") or "EVENT"),
        description=body.get("description"),
        location=body.get("location"),
        color=body.get("color"),
        company_id=int(company_id) if company_id else None,
        is_public=bool(body.get("is_public", True)),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/calendar/events", methods=["GET"], endpoint="calendar_events")
    @login_required
    def calendar_events():
        events = container.calendar_service.unified_events(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            company_id=_optional_int_arg("company_id"),
            start=parse_date_field(request.args.get("start"), "Fecha de inicio"),
            end=parse_date_field(request.args.get("end"), "Fecha de fin"),
        )
        return ok(events)

    @app.route("/api/calendar/birthdays", methods=["GET"], endpoint="calendar_birthdays")
    @hr_required
    def calendar_birthdays():
        return ok(
            container.calendar_service.birthdays(
                company_id=_optional_int_arg("company_id"), month=_optional_int_arg("month")
            )
        )

    @app.route("/api/calendar/events/<int:event_id>", methods=["GET"], endpoint="calendar_event")
    @login_required
    def calendar_event(event_id: int):
        return ok(container.calendar_service.get_event(event_id))

    @app.route("/api/calendar/events", methods=["POST"], endpoint="create_calendar_event")
    @hr_required
    def create_calendar_event():
        event_id = container.calendar_service.create_event(
            current_role=current_role(), user_id=current_user_id(), data=_event_data(json_body())
        )
        return ok({"event_id": event_id}, "Evento creado", 201)

    @app.route("/api/calendar/events/<int:event_id>", methods=["PUT"], endpoint="update_calendar_event")
    @hr_required
    def update_calendar_event(event_id: int):
        container.calendar_service.update_event(
            current_role=current_role(), event_id=event_id, data=_event_data(json_body())
        )
        return ok(message="Evento actualizado")

    @app.route("/api/calendar/events/<int:event_id>", methods=["DELETE"], endpoint="delete_calendar_event")
    @hr_required
    def delete_calendar_event(event_id: int):
        container.calendar_service.delete_event(current_role=current_role(), event_id=event_id)
        return ok(message="Evento eliminado")
