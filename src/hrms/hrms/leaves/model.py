from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveType:
    id: str
    name: str
    max_days_per_year: int
    description: Optional[str] = None
    carry_forward: bool = False
    carry_forward_limit: int = 0
    is_active: bool = True
    company_id: str = "default-company"
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveAssignment:
    """Leave balance of one employee for one leave type in one year.

    `remaining_days` always equals `allocated_days - used_days`; it is derived
    by the repository on every write and never taken from input.
    """

    id: str
    employee_id: str
    leave_type_id: str
    year: int
    allocated_days: int
    used_days: int = 0
    remaining_days: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BulkAssignResult:
    created: list[LeaveAssignment] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LeaveApplication:
    id: str
    employee_id: str
    from_date: date
    to_date: date
    total_days: int
    reason: str
    leave_type_id: Optional[str] = None
    leave_type: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING
    applied_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
