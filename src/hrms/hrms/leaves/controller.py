from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import (
    acting_employee_id,
    auth_guard,
    current_user,
    enum_arg,
    json_body,
    json_response,
    query_arg,
    scoped_employee_id,
)
from ..common.validators import require_int
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_guard(container.auth_service)
    hr_required = auth_guard(container.auth_service, Role.ADMIN, Role.HR)

    # -------- Leave types --------
    @app.get("/api/leave-types")
    @login_required
    def list_leave_types():
        return json_response(container.leave_ledger.list_leave_types())

    @app.post("/api/leave-types")
    @hr_required
    def create_leave_type():
        payload = json_body()
        leave_type = container.leave_ledger.create_leave_type(
            name=payload.get("name", ""),
            description=payload.get("description"),
            max_days_per_year=payload.get("maxDaysPerYear"),
            carry_forward=bool(payload.get("carryForward", False)),
            carry_forward_limit=payload.get("carryForwardLimit", 0),
        )
        return json_response(leave_type, 201)

    # -------- Assignments --------
    @app.get("/api/employee-leave-assignments")
    @login_required
    def list_assignments():
        employee_id = scoped_employee_id()
        year = query_arg("year")
        return json_response(
            container.leave_ledger.list_assignments(
                employee_id=employee_id,
                year=require_int(year, "year") if year else None,
            )
        )

    @app.post("/api/employee-leave-assignments")
    @hr_required
    def create_assignment():
        payload = json_body()
        assignment = container.leave_ledger.assign(
            employee_id=payload.get("employeeId", ""),
            leave_type_id=payload.get("leaveTypeId", ""),
            allocated_days=payload.get("allocatedDays"),
            used_days=payload.get("usedDays", 0),
            year=payload.get("year"),
        )
        return json_response(assignment, 201)

    @app.put("/api/employee-leave-assignments/<assignment_id>")
    @hr_required
    def update_assignment(assignment_id: str):
        payload = json_body()
        # remainingDays in the payload is ignored; it is always derived.
        assignment = container.leave_ledger.update_assignment(
            assignment_id,
            allocated_days=payload.get("allocatedDays"),
            used_days=payload.get("usedDays"),
        )
        return json_response(assignment)

    @app.post("/api/employee-leave-assignments/bulk")
    @hr_required
    def bulk_assign():
        payload = json_body()
        result = container.leave_ledger.bulk_assign(
            employee_ids=payload.get("employeeIds") or [],
            leave_type_id=payload.get("leaveTypeId", ""),
            allocated_days=payload.get("allocatedDays"),
            year=payload.get("year"),
        )
        return json_response(
            {
                "success": True,
                "message": f"Leave assigned to {len(result.created)} employee(s)",
                "created": result.created,
                "skipped": result.skipped,
            },
            201,
        )

    # -------- Applications --------
    @app.get("/api/leave-applications")
    @login_required
    def list_applications():
        employee_id = scoped_employee_id()
        return json_response(
            container.leave_application_service.list_applications(
                employee_id=employee_id,
                status=enum_arg("status", RequestStatus),
            )
        )

    @app.post("/api/leave-applications")
    @login_required
    def submit_application():
        payload = json_body()
        application = container.leave_application_service.submit(
            employee_id=acting_employee_id(payload.get("employeeId")),
            leave_type_id=payload.get("leaveTypeId"),
            leave_type=payload.get("leaveType"),
            from_date=parse_iso_date(payload.get("fromDate", ""), "fromDate"),
            to_date=parse_iso_date(payload.get("toDate", ""), "toDate"),
            reason=payload.get("reason", ""),
        )
        return json_response(application, 201)

    @app.get("/api/leave-applications/<application_id>")
    @login_required
    def get_application(application_id: str):
        application = container.leave_application_service.get(application_id)
        user = current_user()
        if user.role == Role.EMPLOYEE and application.employee_id != user.employee_id:
            raise AuthorizationError("Employees may only view their own applications")
        return json_response(application)
