from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import (
    acting_employee_id,
    auth_guard,
    json_body,
    json_response,
    owner_restriction,
    query_arg,
    scoped_employee_id,
)
from ..core.enums import Role
from ..container import Container
from ..gps.geo import parse_coordinates


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)
    supervisor_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR, Role.MANAGER)

    @app.post("/api/attendance/punch-in")
    @login_required
    def punch_in():
        payload = json_body()
        record = container.attendance_service.punch_in(
            acting_employee_id(payload.get("employeeId")),
            location=parse_coordinates(payload.get("latitude"), payload.get("longitude")),
            address=payload.get("address"),
        )
        return json_response(record, 201)

    @app.post("/api/attendance/punch-out")
    @login_required
    def punch_out():
        payload = json_body()
        record = container.attendance_service.punch_out(
            acting_employee_id(payload.get("employeeId")),
            location=parse_coordinates(payload.get("latitude"), payload.get("longitude")),
            address=payload.get("address"),
        )
        return json_response(record)

    @app.get("/api/attendance")
    @login_required
    def list_attendance():
        employee_id = scoped_employee_id()
        day = query_arg("date")
        records = container.attendance_service.list_records(
            employee_id=employee_id,
            work_date=parse_iso_date(day) if day else None,
        )
        return json_response(records)

    @app.get("/api/attendance/today")
    @supervisor_required
    def attendance_today():
        return json_response(container.attendance_service.today())

    @app.post("/api/attendance/<record_id>/overtime-approval")
    @login_required
    def request_overtime(record_id: str):
        approval = container.attendance_service.request_overtime_approval(
            record_id, employee_id=owner_restriction()
        )
        return json_response(approval, 201)
