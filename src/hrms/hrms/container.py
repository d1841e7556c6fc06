from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.mysql_approval_repository import MySQLApprovalRepository
from .approvals.repository import ApprovalRepository
from .approvals.service import ApprovalRouter
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .employees.service import DepartmentService, EmployeeService
from .gps.geo import GPSCoordinates
from .gps.mysql_field_visit_repository import MySQLFieldVisitRepository
from .gps.repository import FieldVisitRepository
from .gps.service import GPSTrackingService
from .leaves.ledger import LeaveBalanceLedger
from .leaves.mysql_leave_repository import (
    MySQLLeaveApplicationRepository,
    MySQLLeaveAssignmentRepository,
    MySQLLeaveTypeRepository,
)
from .leaves.repository import LeaveApplicationRepository, LeaveAssignmentRepository, LeaveTypeRepository
from .leaves.service import LeaveApplicationService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .requests.mysql_request_repository import MySQLMissPunchRepository
from .requests.repository import MissPunchRepository
from .requests.service import MissPunchService
from .users.mysql_user_repository import MySQLTokenRepository, MySQLUserRepository
from .users.repository import TokenRepository, UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Repositories:
    employees: EmployeeRepository
    departments: DepartmentRepository
    users: UserRepository
    tokens: TokenRepository
    attendance: AttendanceRepository
    leave_types: LeaveTypeRepository
    leave_assignments: LeaveAssignmentRepository
    leave_applications: LeaveApplicationRepository
    miss_punches: MissPunchRepository
    approvals: ApprovalRepository
    field_visits: FieldVisitRepository
    payroll: PayrollRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    department_service: DepartmentService
    attendance_service: AttendanceService
    leave_ledger: LeaveBalanceLedger
    leave_application_service: LeaveApplicationService
    miss_punch_service: MissPunchService
    approval_router: ApprovalRouter
    gps_service: GPSTrackingService
    payroll_service: PayrollService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    repos: Repositories,
    *,
    office: GPSCoordinates,
    token_ttl_days: int,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build every service on top of the given repositories."""

    attendance_service = AttendanceService(repos.attendance, repos.employees, repos.approvals)
    leave_ledger = LeaveBalanceLedger(repos.leave_types, repos.leave_assignments, repos.employees)
    leave_application_service = LeaveApplicationService(repos.leave_applications, leave_ledger, repos.employees)

    return Container(
        repos=repos,
        auth_service=AuthService(repos.users, repos.tokens, ttl_days=token_ttl_days),
        user_service=UserService(repos.users, repos.employees),
        employee_service=EmployeeService(repos.employees, repos.departments),
        department_service=DepartmentService(repos.departments),
        attendance_service=attendance_service,
        leave_ledger=leave_ledger,
        leave_application_service=leave_application_service,
        miss_punch_service=MissPunchService(repos.miss_punches, repos.employees),
        approval_router=ApprovalRouter(
            repos.approvals,
            leave_applications=leave_application_service,
            miss_punches=repos.miss_punches,
            attendance=attendance_service,
        ),
        gps_service=GPSTrackingService(repos.field_visits, repos.attendance, repos.employees, office=office),
        payroll_service=PayrollService(repos.payroll, repos.employees, repos.attendance, repos.leave_applications),
        dashboard_service=DashboardService(repos.employees, repos.attendance, repos.leave_applications),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    office_latitude: float,
    office_longitude: float,
    token_ttl_days: int,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    repos = Repositories(
        employees=MySQLEmployeeRepository(conn),
        departments=MySQLDepartmentRepository(conn),
        users=MySQLUserRepository(conn),
        tokens=MySQLTokenRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leave_types=MySQLLeaveTypeRepository(conn),
        leave_assignments=MySQLLeaveAssignmentRepository(conn),
        leave_applications=MySQLLeaveApplicationRepository(conn),
        miss_punches=MySQLMissPunchRepository(conn),
        approvals=MySQLApprovalRepository(conn),
        field_visits=MySQLFieldVisitRepository(conn),
        payroll=MySQLPayrollRepository(conn),
    )
    office = GPSCoordinates(latitude=office_latitude, longitude=office_longitude)
    return wire_services(repos, office=office, token_ttl_days=token_ttl_days, conn=conn)
