from __future__ import annotations

from flask import Flask

from ..common.http import auth_guard, json_body, json_response, scoped_employee_id
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)
    hr_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR)

    @app.get("/api/payroll")
    @login_required
    def list_payroll():
        return json_response(container.payroll_service.list_records(employee_id=scoped_employee_id()))

    @app.post("/api/payroll/generate")
    @hr_required
    def generate_payroll():
        payload = json_body()
        records = container.payroll_service.generate(
            month=payload.get("month"),
            year=payload.get("year"),
            employee_id=payload.get("employeeId"),
        )
        return json_response(records, 201)
