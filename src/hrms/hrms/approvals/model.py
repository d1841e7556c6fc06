from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalLevel, ApprovalType, RequestStatus


@dataclass(frozen=True)
class Approval:
    """Pending/approved/rejected decision over a leave, miss-punch or overtime request.

    `reference_id` points at the leave application, miss-punch request or
    attendance record that is being decided.
    """

    id: str
    employee_id: str
    approver_id: str
    type: ApprovalType
    reference_id: str
    level: ApprovalLevel = ApprovalLevel.MANAGER
    status: RequestStatus = RequestStatus.PENDING
    comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
