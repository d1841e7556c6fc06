from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..approvals.routing import draft_approval
from ..common.datetime_utils import now_local
from ..common.validators import new_id, require_non_empty
from ..core.enums import ApprovalType, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .ledger import LeaveBalanceLedger
from .model import LeaveApplication
from .repository import LeaveApplicationRepository

logger = logging.getLogger(__name__)


def count_leave_days(from_date: date, to_date: date) -> int:
    """Inclusive number of calendar days between the two dates."""

    if to_date < from_date:
        raise ValidationError("toDate must be on or after fromDate", {"toDate": "before fromDate"})
    return (to_date - from_date).days + 1


class LeaveApplicationService:
    """Use case: employees apply for leave; each application opens a level-1 approval."""

    def __init__(
        self,
        applications: LeaveApplicationRepository,
        ledger: LeaveBalanceLedger,
        employees: EmployeeRepository,
    ):
        self._applications = applications
        self._ledger = ledger
        self._employees = employees

    def submit(
        self,
        *,
        employee_id: str,
        from_date: date,
        to_date: date,
        reason: str,
        leave_type_id: Optional[str] = None,
        leave_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveApplication:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")

        reason = require_non_empty(reason, "reason")
        total_days = count_leave_days(from_date, to_date)

        leave_type_name = (leave_type or "").strip() or None
        if leave_type_id:
            resolved = self._ledger.get_leave_type(leave_type_id)
            leave_type_name = resolved.name
            self._check_balance(employee.id, resolved.id, from_date.year, total_days)
        elif not leave_type_name:
            raise ValidationError("leaveTypeId or leaveType is required", {"leaveTypeId": "required"})

        now = now or now_local()
        application = LeaveApplication(
            id=new_id(),
            employee_id=employee.id,
            leave_type_id=leave_type_id or None,
            leave_type=leave_type_name,
            from_date=from_date,
            to_date=to_date,
            total_days=total_days,
            reason=reason,
            status=RequestStatus.PENDING,
            applied_at=now,
        )
        approval = draft_approval(
            employee=employee,
            approval_type=ApprovalType.LEAVE,
            reference_id=application.id,
            now=now,
        )
        self._applications.create_with_approval(application, approval)
        logger.info("Leave application %s submitted by %s (%d day(s))", application.id, employee.id, total_days)
        return application

    def _check_balance(self, employee_id: str, leave_type_id: str, year: int, days: int) -> None:
        balance = self._ledger.balance_for(employee_id, leave_type_id, year)
        if balance is not None and days > balance.remaining_days:
            raise ValidationError(
                f"Insufficient leave balance: requested {days}, remaining {balance.remaining_days}",
                {"totalDays": "exceeds remaining balance"},
            )

    def ensure_balance(self, application: LeaveApplication) -> None:
        """Re-check the balance before granting; other approvals may have used it since submission."""

        if application.leave_type_id:
            self._check_balance(
                application.employee_id,
                application.leave_type_id,
                application.from_date.year,
                application.total_days,
            )

    def get(self, application_id: str) -> LeaveApplication:
        application = self._applications.get_by_id(application_id)
        if not application:
            raise NotFoundError("Leave application not found")
        return application

    def list_applications(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[LeaveApplication]:
        return self._applications.list(employee_id=employee_id, status=status)

    def consume_balance(self, application: LeaveApplication) -> None:
        """Charge an approved application against the ledger (typed applications only)."""

        if not application.leave_type_id:
            return
        self._ledger.record_usage(
            employee_id=application.employee_id,
            leave_type_id=application.leave_type_id,
            year=application.from_date.year,
            days=application.total_days,
        )
