from __future__ import annotations

from datetime import datetime

from ..common.validators import new_id
from ..core.enums import ApprovalLevel, ApprovalType, RequestStatus
from ..employees.model import Employee
from .model import Approval


def resolve_approver(employee: Employee) -> str:
    """First-level approver: the employee's manager, else the employee themselves as a placeholder."""

    return employee.manager_id or employee.id


def draft_approval(
    *,
    employee: Employee,
    approval_type: ApprovalType,
    reference_id: str,
    now: datetime,
    level: ApprovalLevel = ApprovalLevel.MANAGER,
) -> Approval:
    return Approval(
        id=new_id(),
        employee_id=employee.id,
        approver_id=resolve_approver(employee),
        type=approval_type,
        reference_id=reference_id,
        level=level,
        status=RequestStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
