from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_date_field
from ..common.web import login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays")
    @login_required
    def holidays():
        try:
            year = int(request.args.get("year") or now_local().year)
        except ValueError:
            raise ValidationError("Año no válido")
        items = [{"date": d, "name": name} for d, name in container.holiday_calendar.holidays_for_year(year)]
        return ok(items)

    @app.route("/api/holidays/business-days", methods=["GET"], endpoint="business_days")
    @login_required
    def business_days():
        start = parse_date_field(request.args.get("start"), "Fecha de inicio")
        end = parse_date_field(request.args.get("end"), "Fecha de fin")
        return ok({"start": start, "end": end, "business_days": container.holiday_calendar.business_days_count(start, end)})
