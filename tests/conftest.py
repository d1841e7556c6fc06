from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from src.hrms.hrms.container import Repositories, wire_services
from src.hrms.hrms.core.enums import AttendanceStatus, FieldVisitStatus, PunchType, RequestStatus
from src.hrms.hrms.employees.model import Department, Employee
from src.hrms.hrms.gps.geo import GPSCoordinates
from src.hrms.hrms.main import create_app

OFFICE = GPSCoordinates(latitude=28.6139, longitude=77.2090)


class InMemoryStore:
    """Shared tables so repositories can cascade like one database would."""

    def __init__(self):
        self.employees: dict[str, Employee] = {}
        self.departments: dict[str, Department] = {}
        self.users = {}
        self.tokens = {}
        self.attendance = {}
        self.leave_types = {}
        self.assignments = {}
        self.leave_applications = {}
        self.miss_punches = {}
        self.approvals = {}
        self.visits = {}
        self.payroll = {}
        self._tick = 0

    def tick(self) -> int:
        self._tick += 1
        return self._tick


class FakeEmployeeRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, employee_id):
        return self._s.employees.get(employee_id)

    def get_by_code(self, employee_code):
        return next((e for e in self._s.employees.values() if e.employee_code == employee_code), None)

    def get_by_email(self, email):
        return next((e for e in self._s.employees.values() if e.email == email), None)

    def list_active(self, *, limit=200):
        return [e for e in self._s.employees.values() if e.is_active][:limit]

    def count_active(self):
        return sum(1 for e in self._s.employees.values() if e.is_active)

    def create(self, employee):
        self._s.employees[employee.id] = employee

    def update(self, employee_id, changes):
        if employee_id not in self._s.employees:
            return False
        self._s.employees[employee_id] = replace(self._s.employees[employee_id], **dict(changes))
        return True

    def set_active(self, employee_id, *, is_active):
        return self.update(employee_id, {"is_active": is_active})


class FakeDepartmentRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, department_id):
        return self._s.departments.get(department_id)

    def get_by_code(self, code):
        return next((d for d in self._s.departments.values() if d.code == code), None)

    def list_all(self):
        return sorted(self._s.departments.values(), key=lambda d: d.name)

    def create(self, department):
        self._s.departments[department.id] = department


class FakeUserRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, user_id):
        return self._s.users.get(user_id)

    def get_by_username(self, username):
        return next((u for u in self._s.users.values() if u.username == username), None)

    def create(self, user):
        self._s.users[user.id] = user

    def touch_last_login(self, user_id, when):
        if user_id not in self._s.users:
            return False
        self._s.users[user_id] = replace(self._s.users[user_id], last_login=when)
        return True


class FakeTokenRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, token):
        self._s.tokens[token.token] = token

    def get(self, token):
        return self._s.tokens.get(token)

    def delete(self, token):
        return self._s.tokens.pop(token, None) is not None

    def delete_expired(self, now):
        expired = [t for t, v in self._s.tokens.items() if v.expires_at <= now]
        for t in expired:
            del self._s.tokens[t]
        return len(expired)


class FakeAttendanceRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store
        self._order: dict[str, int] = {}

    def _put(self, record):
        self._s.attendance[record.id] = record

    def _for_day(self, employee_id, work_date):
        rows = [r for r in self._s.attendance.values() if r.employee_id == employee_id and r.date == work_date]
        return sorted(rows, key=lambda r: self._order.get(r.id, 0))

    def add(self, record):
        """Test helper: store a record as-is (e.g. an absent placeholder)."""

        self._order[record.id] = self._s.tick()
        self._put(record)

    def get_by_id(self, record_id):
        return self._s.attendance.get(record_id)

    def get_latest_for_date(self, employee_id, work_date):
        rows = self._for_day(employee_id, work_date)
        return rows[-1] if rows else None

    def get_open_for_date(self, employee_id, work_date):
        rows = [r for r in self._for_day(employee_id, work_date) if r.is_open]
        return max(rows, key=lambda r: r.punch_in) if rows else None

    def create_punch_in(self, record):
        if self.get_open_for_date(record.employee_id, record.date):
            return False
        self.add(record)
        return True

    def start_placeholder(self, record_id, *, punch_in, latitude=None, longitude=None, address=None):
        record = self._s.attendance.get(record_id)
        if not record or record.punch_in is not None:
            return False
        self._put(
            replace(
                record,
                punch_in=punch_in,
                status=AttendanceStatus.PRESENT,
                punch_in_latitude=latitude,
                punch_in_longitude=longitude,
                punch_in_address=address,
            )
        )
        return True

    def close_session(
        self,
        record_id,
        *,
        punch_out,
        working_hours,
        overtime_hours,
        latitude=None,
        longitude=None,
        address=None,
    ):
        record = self._s.attendance.get(record_id)
        if not record or not record.is_open:
            return False
        self._put(
            replace(
                record,
                punch_out=punch_out,
                working_hours=working_hours,
                overtime_hours=overtime_hours,
                punch_out_latitude=record.punch_out_latitude if latitude is None else latitude,
                punch_out_longitude=record.punch_out_longitude if longitude is None else longitude,
                punch_out_address=record.punch_out_address if address is None else address,
            )
        )
        return True

    def amend_times(self, record_id, *, punch_in, punch_out, working_hours, overtime_hours, status):
        record = self._s.attendance.get(record_id)
        if not record:
            return False
        self._put(
            replace(
                record,
                punch_in=punch_in,
                punch_out=punch_out,
                working_hours=working_hours,
                overtime_hours=overtime_hours,
                status=status,
            )
        )
        return True

    def update_location(self, record_id, *, slot, latitude, longitude, address, is_field_work):
        record = self._s.attendance.get(record_id)
        if not record:
            return False
        prefix = "punch_in" if slot == PunchType.IN else "punch_out"
        self._put(
            replace(
                record,
                **{
                    f"{prefix}_latitude": latitude,
                    f"{prefix}_longitude": longitude,
                    f"{prefix}_address": address,
                    "is_field_work": is_field_work,
                },
            )
        )
        return True

    def list_records(self, *, employee_id=None, work_date=None, limit=200):
        rows = [
            r
            for r in self._s.attendance.values()
            if (employee_id is None or r.employee_id == employee_id) and (work_date is None or r.date == work_date)
        ]
        return rows[:limit]

    def list_for_period(self, employee_id, start, end):
        return [r for r in self._s.attendance.values() if r.employee_id == employee_id and start <= r.date <= end]

    def count_present(self, work_date):
        return len(
            {
                r.employee_id
                for r in self._s.attendance.values()
                if r.date == work_date and r.status == AttendanceStatus.PRESENT
            }
        )


class FakeApprovalRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, approval):
        self._s.approvals[approval.id] = approval

    def get_by_id(self, approval_id):
        return self._s.approvals.get(approval_id)

    def find_by_reference(self, approval_type, reference_id):
        return next(
            (a for a in self._s.approvals.values() if a.type == approval_type and a.reference_id == reference_id),
            None,
        )

    def list(self, *, status=None, limit=200):
        return [a for a in self._s.approvals.values() if status is None or a.status == status][:limit]

    def decide(self, approval_id, *, status, comments, decided_by, decided_at):
        approval = self._s.approvals.get(approval_id)
        if not approval or approval.status != RequestStatus.PENDING:
            return False
        self._s.approvals[approval_id] = replace(approval, status=status, comments=comments, updated_at=decided_at)

        ref = approval.reference_id
        if ref in self._s.leave_applications and self._s.leave_applications[ref].status == RequestStatus.PENDING:
            self._s.leave_applications[ref] = replace(
                self._s.leave_applications[ref],
                status=status,
                approved_by=decided_by,
                approved_at=decided_at,
                comments=comments,
            )
        if ref in self._s.miss_punches and self._s.miss_punches[ref].status == RequestStatus.PENDING:
            self._s.miss_punches[ref] = replace(
                self._s.miss_punches[ref],
                status=status,
                approved_by=decided_by,
                approved_at=decided_at,
            )
        return True


class FakeLeaveTypeRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, leave_type):
        self._s.leave_types[leave_type.id] = leave_type

    def get_by_id(self, leave_type_id):
        return self._s.leave_types.get(leave_type_id)

    def get_by_name(self, name):
        return next((t for t in self._s.leave_types.values() if t.name == name), None)

    def list_all(self, *, active_only=True):
        return [t for t in self._s.leave_types.values() if t.is_active or not active_only]


class FakeLeaveAssignmentRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _put(self, assignment):
        self._s.assignments[assignment.id] = replace(
            assignment, remaining_days=assignment.allocated_days - assignment.used_days
        )

    def create(self, assignment):
        if self.find(assignment.employee_id, assignment.leave_type_id, assignment.year):
            return False
        self._put(assignment)
        return True

    def create_many(self, assignments):
        return [a for a in assignments if self.create(a)]

    def get_by_id(self, assignment_id):
        return self._s.assignments.get(assignment_id)

    def find(self, employee_id, leave_type_id, year):
        return next(
            (
                a
                for a in self._s.assignments.values()
                if a.employee_id == employee_id and a.leave_type_id == leave_type_id and a.year == year
            ),
            None,
        )

    def list(self, *, employee_id=None, year=None, limit=200):
        return [
            a
            for a in self._s.assignments.values()
            if (employee_id is None or a.employee_id == employee_id) and (year is None or a.year == year)
        ][:limit]

    def update(self, assignment_id, *, allocated_days=None, used_days=None):
        current = self._s.assignments.get(assignment_id)
        if not current:
            return False
        self._put(
            replace(
                current,
                allocated_days=current.allocated_days if allocated_days is None else allocated_days,
                used_days=current.used_days if used_days is None else used_days,
            )
        )
        return True

    def add_usage(self, employee_id, leave_type_id, year, days):
        current = self.find(employee_id, leave_type_id, year)
        if not current:
            return False
        self._put(replace(current, used_days=current.used_days + days))
        return True


class FakeLeaveApplicationRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create_with_approval(self, application, approval):
        self._s.leave_applications[application.id] = application
        self._s.approvals[approval.id] = approval

    def get_by_id(self, application_id):
        return self._s.leave_applications.get(application_id)

    def list(self, *, employee_id=None, status=None, limit=200):
        return [
            a
            for a in self._s.leave_applications.values()
            if (employee_id is None or a.employee_id == employee_id) and (status is None or a.status == status)
        ][:limit]

    def list_approved_overlapping(self, employee_id, start, end):
        return [
            a
            for a in self._s.leave_applications.values()
            if a.employee_id == employee_id
            and a.status == RequestStatus.APPROVED
            and a.from_date <= end
            and a.to_date >= start
        ]

    def count_by_status(self, status):
        return sum(1 for a in self._s.leave_applications.values() if a.status == status)


class FakeMissPunchRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create_with_approval(self, request, approval):
        self._s.miss_punches[request.id] = request
        self._s.approvals[approval.id] = approval

    def get_by_id(self, request_id):
        return self._s.miss_punches.get(request_id)

    def list(self, *, employee_id=None, status=None, limit=200):
        return [
            r
            for r in self._s.miss_punches.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ][:limit]


class FakeFieldVisitRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _mine(self, employee_id):
        return sorted(
            (v for v in self._s.visits.values() if v.employee_id == employee_id),
            key=lambda v: v.start_time,
        )

    def create(self, visit):
        self._s.visits[visit.id] = visit

    def get_by_id(self, visit_id):
        return self._s.visits.get(visit_id)

    def get_latest_for_employee(self, employee_id):
        visits = self._mine(employee_id)
        return visits[-1] if visits else None

    def get_active_for_employee(self, employee_id):
        visits = [v for v in self._mine(employee_id) if v.status == FieldVisitStatus.IN_PROGRESS]
        return visits[-1] if visits else None

    def update_end_location(self, visit_id, *, latitude, longitude, address, distance):
        visit = self._s.visits.get(visit_id)
        if not visit or visit.status != FieldVisitStatus.IN_PROGRESS:
            return False
        self._s.visits[visit_id] = replace(
            visit, end_latitude=latitude, end_longitude=longitude, end_address=address, distance=distance
        )
        return True

    def complete(self, visit_id, *, end_time, latitude, longitude, address, distance, notes):
        visit = self._s.visits.get(visit_id)
        if not visit or visit.status != FieldVisitStatus.IN_PROGRESS:
            return False
        self._s.visits[visit_id] = replace(
            visit,
            status=FieldVisitStatus.COMPLETED,
            end_time=end_time,
            end_latitude=latitude,
            end_longitude=longitude,
            end_address=address,
            distance=distance,
            notes=notes,
        )
        return True

    def list_started_between(self, employee_id, start, end):
        return [v for v in reversed(self._mine(employee_id)) if start <= v.start_time < end]


class FakePayrollRepo:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def replace(self, record):
        self._s.payroll[(record.employee_id, record.month, record.year)] = record

    def get_for_period(self, employee_id, month, year):
        return self._s.payroll.get((employee_id, month, year))

    def list(self, *, employee_id=None, limit=200):
        return [r for r in self._s.payroll.values() if employee_id is None or r.employee_id == employee_id][:limit]


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repos(store):
    return Repositories(
        employees=FakeEmployeeRepo(store),
        departments=FakeDepartmentRepo(store),
        users=FakeUserRepo(store),
        tokens=FakeTokenRepo(store),
        attendance=FakeAttendanceRepo(store),
        leave_types=FakeLeaveTypeRepo(store),
        leave_assignments=FakeLeaveAssignmentRepo(store),
        leave_applications=FakeLeaveApplicationRepo(store),
        miss_punches=FakeMissPunchRepo(store),
        approvals=FakeApprovalRepo(store),
        field_visits=FakeFieldVisitRepo(store),
        payroll=FakePayrollRepo(store),
    )


@pytest.fixture
def container(repos):
    return wire_services(repos, office=OFFICE, token_ttl_days=7)


@pytest.fixture
def people(repos):
    """One department with a manager and two reports."""

    dept = Department(id="dept-eng", name="Engineering", code="ENG")
    repos.departments.create(dept)

    def make(emp_id, code, *, manager_id=None, salary="30000"):
        employee = Employee(
            id=emp_id,
            employee_code=code,
            name=f"Employee {code}",
            email=f"{code.lower()}@example.com",
            department_id=dept.id,
            designation="Engineer",
            salary=Decimal(salary),
            join_date=date(2024, 1, 1),
            manager_id=manager_id,
        )
        repos.employees.create(employee)
        return employee

    manager = make("emp-mgr", "EMP001", salary="60000")
    staff = make("emp-staff", "EMP002", manager_id=manager.id)
    other = make("emp-other", "EMP003", manager_id=manager.id)
    return SimpleNamespace(department=dept, manager=manager, staff=staff, other=other)


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    flask_app = create_app(container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(container, people):
    """Create an account and return Authorization headers for it."""

    def _login(username, role, employee_id=None):
        container.user_service.create_account(
            username=username,
            password="secret123",
            role=role,
            employee_id=employee_id,
        )
        issued = container.auth_service.login(username, "secret123")
        return {"Authorization": f"Bearer {issued.token}"}

    return _login


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 10, 9, 0, 0)
