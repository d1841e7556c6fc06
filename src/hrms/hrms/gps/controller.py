from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import acting_employee_id, auth_guard, json_body, json_response, owner_restriction, query_arg
from ..common.validators import require_int
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.exceptions import ValidationError
from .geo import parse_coordinates


def _coordinates(payload: dict, *, required: bool = False):
    timestamp = payload.get("timestamp")
    return parse_coordinates(
        payload.get("latitude"),
        payload.get("longitude"),
        timestamp=parse_iso_datetime(timestamp, "timestamp") if timestamp else None,
        accuracy=payload.get("accuracy"),
        required=required,
    )


def _flag(payload: dict, name: str) -> bool:
    value = payload.get(name, False)
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false", {name: "not a boolean"})
    return value


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)

    @app.post("/api/gps/update-location")
    @login_required
    def update_location():
        payload = json_body()
        result = container.gps_service.update_location(
            employee_id=acting_employee_id(payload.get("employeeId")),
            coordinates=_coordinates(payload, required=True),
            address=payload.get("address"),
            is_field_work=_flag(payload, "isFieldWork"),
        )
        return json_response(result)

    @app.post("/api/gps/start-fieldwork")
    @login_required
    def start_fieldwork():
        payload = json_body()
        visit = container.gps_service.start_field_work(
            employee_id=acting_employee_id(payload.get("employeeId")),
            client_name=payload.get("clientName", ""),
            purpose=payload.get("purpose", ""),
            coordinates=_coordinates(payload),
            address=payload.get("address"),
        )
        return json_response(visit, 201)

    @app.put("/api/gps/end-fieldwork/<visit_id>")
    @login_required
    def end_fieldwork(visit_id: str):
        payload = json_body()
        visit = container.gps_service.end_field_work(
            visit_id,
            employee_id=owner_restriction(),
            coordinates=_coordinates(payload),
            address=payload.get("address"),
            notes=payload.get("notes"),
        )
        return json_response(visit)

    @app.get("/api/gps/location-history/<employee_id>")
    @login_required
    def location_history(employee_id: str):
        days = query_arg("days")
        history = container.gps_service.location_history(
            acting_employee_id(employee_id),
            days=require_int(days, "days", min_value=1) if days else DEFAULT_HISTORY_DAYS,
        )
        return json_response(history)

    @app.get("/api/gps/location-report/<employee_id>")
    @login_required
    def location_report(employee_id: str):
        report = container.gps_service.location_report(
            acting_employee_id(employee_id),
            from_date=parse_iso_date(query_arg("fromDate") or "", "fromDate"),
            to_date=parse_iso_date(query_arg("toDate") or "", "toDate"),
        )
        return json_response(report)
