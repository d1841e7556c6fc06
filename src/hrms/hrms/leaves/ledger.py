"""Leave balance ledger.

Tracks allocated / used / remaining days per employee, leave type and year.
Remaining days are never accepted from callers: the repository derives them
from the stored counters on every write.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ..common.validators import new_id, require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import BulkAssignResult, LeaveAssignment, LeaveType
from .repository import LeaveAssignmentRepository, LeaveTypeRepository

logger = logging.getLogger(__name__)


class LeaveBalanceLedger:
    def __init__(
        self,
        leave_types: LeaveTypeRepository,
        assignments: LeaveAssignmentRepository,
        employees: EmployeeRepository,
    ):
        self._leave_types = leave_types
        self._assignments = assignments
        self._employees = employees

    # -------- Leave types --------
    def create_leave_type(
        self,
        *,
        name: str,
        max_days_per_year: Any,
        description: Optional[str] = None,
        carry_forward: bool = False,
        carry_forward_limit: Any = 0,
    ) -> LeaveType:
        name = require_non_empty(name, "name")
        max_days = require_int(max_days_per_year, "maxDaysPerYear", min_value=0)
        limit = require_int(carry_forward_limit or 0, "carryForwardLimit", min_value=0)
        if self._leave_types.get_by_name(name):
            raise ValidationError("Leave type already exists", {"name": "duplicate"})

        leave_type = LeaveType(
            id=new_id(),
            name=name,
            description=(description or "").strip() or None,
            max_days_per_year=max_days,
            carry_forward=bool(carry_forward),
            carry_forward_limit=limit if carry_forward else 0,
        )
        self._leave_types.create(leave_type)
        return leave_type

    def list_leave_types(self) -> Sequence[LeaveType]:
        return self._leave_types.list_all()

    def get_leave_type(self, leave_type_id: str) -> LeaveType:
        leave_type = self._leave_types.get_by_id(leave_type_id)
        if not leave_type:
            raise NotFoundError("Leave type not found")
        return leave_type

    # -------- Assignments --------
    def _require_employee(self, employee_id: str) -> None:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError(f"Employee not found: {employee_id}")

    def assign(
        self,
        *,
        employee_id: str,
        leave_type_id: str,
        allocated_days: Any,
        year: Any,
        used_days: Any = 0,
    ) -> LeaveAssignment:
        employee_id = require_non_empty(employee_id, "employeeId")
        self.get_leave_type(require_non_empty(leave_type_id, "leaveTypeId"))
        self._require_employee(employee_id)

        allocated = require_int(allocated_days, "allocatedDays", min_value=0)
        used = require_int(used_days or 0, "usedDays", min_value=0)
        assignment = LeaveAssignment(
            id=new_id(),
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            year=require_int(year, "year", min_value=1),
            allocated_days=allocated,
            used_days=used,
            remaining_days=allocated - used,
        )
        if not self._assignments.create(assignment):
            raise ValidationError(
                "Leave type already assigned to this employee for that year",
                {"leaveTypeId": "duplicate"},
            )
        return assignment

    def update_assignment(
        self,
        assignment_id: str,
        *,
        allocated_days: Any = None,
        used_days: Any = None,
    ) -> LeaveAssignment:
        if not self._assignments.get_by_id(assignment_id):
            raise NotFoundError("Leave assignment not found")

        allocated = require_int(allocated_days, "allocatedDays", min_value=0) if allocated_days is not None else None
        used = require_int(used_days, "usedDays", min_value=0) if used_days is not None else None
        if allocated is None and used is None:
            raise ValidationError("Nothing to update")

        self._assignments.update(assignment_id, allocated_days=allocated, used_days=used)
        return self._assignments.get_by_id(assignment_id)

    def bulk_assign(
        self,
        *,
        employee_ids: Iterable[str],
        leave_type_id: str,
        allocated_days: Any,
        year: Any,
    ) -> BulkAssignResult:
        ids = list(dict.fromkeys(e for e in (employee_ids or []) if e))
        if not ids:
            raise ValidationError("employeeIds must not be empty", {"employeeIds": "required"})
        self.get_leave_type(require_non_empty(leave_type_id, "leaveTypeId"))
        allocated = require_int(allocated_days, "allocatedDays", min_value=0)
        year_value = require_int(year, "year", min_value=1)
        for employee_id in ids:
            self._require_employee(employee_id)

        drafts = [
            LeaveAssignment(
                id=new_id(),
                employee_id=employee_id,
                leave_type_id=leave_type_id,
                year=year_value,
                allocated_days=allocated,
                used_days=0,
                remaining_days=allocated,
            )
            for employee_id in ids
        ]
        created = list(self._assignments.create_many(drafts))
        created_ids = {a.employee_id for a in created}
        skipped = [e for e in ids if e not in created_ids]
        if skipped:
            logger.info("Bulk leave assignment skipped %d already-assigned employee(s)", len(skipped))
        return BulkAssignResult(created=created, skipped=skipped)

    def list_assignments(
        self,
        *,
        employee_id: Optional[str] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveAssignment]:
        return self._assignments.list(employee_id=employee_id, year=year)

    def balance_for(self, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveAssignment]:
        return self._assignments.find(employee_id, leave_type_id, year)

    def record_usage(self, *, employee_id: str, leave_type_id: str, year: int, days: int) -> bool:
        """Consume `days` from the balance when leave is granted."""

        ok = self._assignments.add_usage(employee_id, leave_type_id, year, days)
        if not ok:
            logger.warning(
                "No leave assignment for employee %s, leave type %s, year %s; usage of %d day(s) not recorded",
                employee_id,
                leave_type_id,
                year,
                days,
            )
        return ok
