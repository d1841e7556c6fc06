from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..approvals.model import Approval
from ..approvals.mysql_approval_repository import insert_approval
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, where_clause
from .model import LeaveApplication, LeaveAssignment, LeaveType
from .repository import LeaveApplicationRepository, LeaveAssignmentRepository, LeaveTypeRepository

_TYPE_COLUMNS = """
    id, name, description, max_days_per_year, carry_forward, carry_forward_limit,
    is_active, company_id, created_at
"""
_ASSIGNMENT_COLUMNS = """
    id, employee_id, leave_type_id, allocated_days, used_days, remaining_days, year, created_at, updated_at
"""
_APPLICATION_COLUMNS = """
    id, employee_id, leave_type_id, leave_type, from_date, to_date, total_days, reason,
    status, applied_at, approved_by, approved_at, comments
"""


def _to_leave_type(r: dict) -> LeaveType:
    return LeaveType(
        id=r["id"],
        name=r["name"],
        description=r.get("description"),
        max_days_per_year=int(r["max_days_per_year"]),
        carry_forward=bool(r.get("carry_forward", False)),
        carry_forward_limit=int(r.get("carry_forward_limit") or 0),
        is_active=bool(r.get("is_active", True)),
        company_id=r.get("company_id") or "default-company",
        created_at=r.get("created_at"),
    )


def _to_assignment(r: dict) -> LeaveAssignment:
    return LeaveAssignment(
        id=r["id"],
        employee_id=r["employee_id"],
        leave_type_id=r["leave_type_id"],
        year=int(r["year"]),
        allocated_days=int(r["allocated_days"]),
        used_days=int(r["used_days"]),
        remaining_days=int(r["remaining_days"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_application(r: dict) -> LeaveApplication:
    return LeaveApplication(
        id=r["id"],
        employee_id=r["employee_id"],
        leave_type_id=r.get("leave_type_id"),
        leave_type=r.get("leave_type"),
        from_date=r["from_date"],
        to_date=r["to_date"],
        total_days=int(r["total_days"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        applied_at=r.get("applied_at"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        comments=r.get("comments"),
    )


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, leave_type: LeaveType) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_types(
                    id, name, description, max_days_per_year, carry_forward, carry_forward_limit, is_active, company_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    leave_type.id,
                    leave_type.name,
                    leave_type.description,
                    leave_type.max_days_per_year,
                    1 if leave_type.carry_forward else 0,
                    leave_type.carry_forward_limit,
                    1 if leave_type.is_active else 0,
                    leave_type.company_id,
                ),
            )

    def get_by_id(self, leave_type_id: str) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TYPE_COLUMNS} FROM leave_types WHERE id=%s", (leave_type_id,))
            row = fetchone(cur)
            return _to_leave_type(row) if row else None

    def get_by_name(self, name: str) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TYPE_COLUMNS} FROM leave_types WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_leave_type(row) if row else None

    def list_all(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        where = "is_active=1" if active_only else "1=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TYPE_COLUMNS} FROM leave_types WHERE {where} ORDER BY name")
            return [_to_leave_type(r) for r in fetchall(cur)]


class MySQLLeaveAssignmentRepository(LeaveAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _insert(cur, assignment: LeaveAssignment) -> None:
        cur.execute(
            """
            INSERT INTO employee_leave_assignments(
                id, employee_id, leave_type_id, allocated_days, used_days, remaining_days, year
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                assignment.id,
                assignment.employee_id,
                assignment.leave_type_id,
                assignment.allocated_days,
                assignment.used_days,
                assignment.allocated_days - assignment.used_days,
                assignment.year,
            ),
        )

    def create(self, assignment: LeaveAssignment) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                self._insert(cur, assignment)
                return True
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise

    def create_many(self, assignments: Sequence[LeaveAssignment]) -> Sequence[LeaveAssignment]:
        created: list[LeaveAssignment] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for assignment in assignments:
                # InnoDB rolls back only the failed statement; earlier rows stay in the transaction.
                try:
                    self._insert(cur, assignment)
                except mysql_errors.IntegrityError as exc:
                    if not is_duplicate_key(exc):
                        raise
                    continue
                created.append(assignment)
        return created

    def get_by_id(self, assignment_id: str) -> Optional[LeaveAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ASSIGNMENT_COLUMNS} FROM employee_leave_assignments WHERE id=%s", (assignment_id,))
            row = fetchone(cur)
            return _to_assignment(row) if row else None

    def find(self, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM employee_leave_assignments
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (employee_id, leave_type_id, int(year)),
            )
            row = fetchone(cur)
            return _to_assignment(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveAssignment]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if year is not None:
            clauses.append("year=%s")
            params.append(int(year))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ASSIGNMENT_COLUMNS} FROM employee_leave_assignments
                WHERE {where_clause(clauses)}
                ORDER BY year DESC, created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def update(
        self,
        assignment_id: str,
        *,
        allocated_days: Optional[int] = None,
        used_days: Optional[int] = None,
    ) -> bool:
        # MySQL applies single-table SET assignments left to right, so
        # remaining_days sees the new allocated/used values.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_leave_assignments
                SET allocated_days=COALESCE(%s, allocated_days),
                    used_days=COALESCE(%s, used_days),
                    remaining_days=allocated_days - used_days
                WHERE id=%s
                """,
                (allocated_days, used_days, assignment_id),
            )
            return cur.rowcount > 0

    def add_usage(self, employee_id: str, leave_type_id: str, year: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_leave_assignments
                SET used_days=used_days + %s,
                    remaining_days=allocated_days - used_days
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(days), employee_id, leave_type_id, int(year)),
            )
            return cur.rowcount > 0


class MySQLLeaveApplicationRepository(LeaveApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_with_approval(self, application: LeaveApplication, approval: Approval) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_applications(
                    id, employee_id, leave_type_id, leave_type, from_date, to_date, total_days,
                    reason, status, applied_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    application.id,
                    application.employee_id,
                    application.leave_type_id,
                    application.leave_type,
                    application.from_date,
                    application.to_date,
                    application.total_days,
                    application.reason,
                    application.status.value,
                    application.applied_at,
                ),
            )
            insert_approval(cur, approval)

    def get_by_id(self, application_id: str) -> Optional[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_APPLICATION_COLUMNS} FROM leave_applications WHERE id=%s", (application_id,))
            row = fetchone(cur)
            return _to_application(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_APPLICATION_COLUMNS} FROM leave_applications
                WHERE {where_clause(clauses)}
                ORDER BY applied_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_application(r) for r in fetchall(cur)]

    def list_approved_overlapping(self, employee_id: str, start: date, end: date) -> Sequence[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_APPLICATION_COLUMNS} FROM leave_applications
                WHERE employee_id=%s AND status=%s AND from_date <= %s AND to_date >= %s
                ORDER BY from_date
                """,
                (employee_id, RequestStatus.APPROVED.value, end, start),
            )
            return [_to_application(r) for r in fetchall(cur)]

    def count_by_status(self, status: RequestStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM leave_applications WHERE status=%s", (status.value,))
            return int(fetchone(cur)["total"])
