from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..common.http import acting_employee_id, auth_guard, enum_arg, json_body, json_response, scoped_employee_id
from ..core.enums import RequestStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)

    @app.get("/api/miss-punch-requests")
    @login_required
    def list_miss_punch_requests():
        return json_response(
            container.miss_punch_service.list_requests(
                employee_id=scoped_employee_id(),
                status=enum_arg("status", RequestStatus),
            )
        )

    @app.post("/api/miss-punch-requests")
    @login_required
    def submit_miss_punch_request():
        payload = json_body()
        request = container.miss_punch_service.submit(
            employee_id=acting_employee_id(payload.get("employeeId")),
            work_date=parse_iso_date(payload.get("date", "")),
            punch_type=payload.get("punchType", ""),
            requested_time=parse_iso_datetime(payload.get("requestedTime", ""), "requestedTime"),
            reason=payload.get("reason", ""),
        )
        return json_response(request, 201)
