from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import auth_guard, json_body, json_response, pick
from ..core.enums import Role
from ..container import Container

_EMPLOYEE_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("phone", "phone"),
    ("departmentId", "department_id"),
    ("designation", "designation"),
    ("salary", "salary"),
    ("pfNumber", "pf_number"),
    ("managerId", "manager_id"),
)


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)
    hr_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR)

    @app.get("/api/employees")
    @login_required
    def list_employees():
        return json_response(container.employee_service.list_employees())

    @app.post("/api/employees")
    @hr_required
    def create_employee():
        payload = json_body()
        employee = container.employee_service.create_employee(
            employee_code=payload.get("employeeCode", ""),
            name=payload.get("name", ""),
            email=payload.get("email", ""),
            department_id=payload.get("departmentId", ""),
            designation=payload.get("designation", ""),
            salary=payload.get("salary"),
            join_date=parse_iso_date(payload.get("joinDate", ""), "joinDate"),
            phone=payload.get("phone"),
            pf_number=payload.get("pfNumber"),
            manager_id=payload.get("managerId"),
        )
        return json_response(employee, 201)

    @app.get("/api/employees/<employee_id>")
    @login_required
    def get_employee(employee_id: str):
        return json_response(container.employee_service.get_employee(employee_id))

    @app.put("/api/employees/<employee_id>")
    @hr_required
    def update_employee(employee_id: str):
        changes = pick(json_body(), _EMPLOYEE_FIELDS)
        return json_response(container.employee_service.update_employee(employee_id, changes))

    @app.post("/api/employees/<employee_id>/deactivate")
    @hr_required
    def deactivate_employee(employee_id: str):
        container.employee_service.deactivate(employee_id)
        return json_response({"success": True})

    @app.get("/api/departments")
    @login_required
    def list_departments():
        return json_response(container.department_service.list_departments())

    @app.post("/api/departments")
    @hr_required
    def create_department():
        payload = json_body()
        department = container.department_service.create_department(
            name=payload.get("name", ""),
            code=payload.get("code", ""),
        )
        return json_response(department, 201)
