from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..approvals.model import Approval
from ..core.enums import RequestStatus
from .model import LeaveApplication, LeaveAssignment, LeaveType


class LeaveTypeRepository(Protocol):
    def create(self, leave_type: LeaveType) -> None:
        raise NotImplementedError

    def get_by_id(self, leave_type_id: str) -> Optional[LeaveType]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        raise NotImplementedError


class LeaveAssignmentRepository(Protocol):
    def create(self, assignment: LeaveAssignment) -> bool:
        """Insert with remaining = allocated - used. False when (employee, type, year) already exists."""
        raise NotImplementedError

    def create_many(self, assignments: Sequence[LeaveAssignment]) -> Sequence[LeaveAssignment]:
        """Insert in one transaction, skipping existing (employee, type, year); returns the inserted rows."""
        raise NotImplementedError

    def get_by_id(self, assignment_id: str) -> Optional[LeaveAssignment]:
        raise NotImplementedError

    def find(self, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveAssignment]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveAssignment]:
        raise NotImplementedError

    def update(
        self,
        assignment_id: str,
        *,
        allocated_days: Optional[int] = None,
        used_days: Optional[int] = None,
    ) -> bool:
        """Apply the given counters and recompute remaining from the stored values in the same statement."""
        raise NotImplementedError

    def add_usage(self, employee_id: str, leave_type_id: str, year: int, days: int) -> bool:
        raise NotImplementedError


class LeaveApplicationRepository(Protocol):
    def create_with_approval(self, application: LeaveApplication, approval: Approval) -> None:
        raise NotImplementedError

    def get_by_id(self, application_id: str) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        raise NotImplementedError

    def list_approved_overlapping(self, employee_id: str, start: date, end: date) -> Sequence[LeaveApplication]:
        raise NotImplementedError

    def count_by_status(self, status: RequestStatus) -> int:
        raise NotImplementedError
