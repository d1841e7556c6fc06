from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..approvals.routing import draft_approval
from ..common.datetime_utils import now_local
from ..common.validators import new_id, require_non_empty
from ..core.enums import ApprovalType, PunchType, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import MissPunchRequest
from .repository import MissPunchRepository

logger = logging.getLogger(__name__)


class MissPunchService:
    def __init__(self, requests: MissPunchRepository, employees: EmployeeRepository):
        self._requests = requests
        self._employees = employees

    def submit(
        self,
        *,
        employee_id: str,
        work_date: date,
        punch_type: str,
        requested_time: datetime,
        reason: str,
        now: Optional[datetime] = None,
    ) -> MissPunchRequest:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")

        try:
            kind = PunchType(str(punch_type or "").strip().lower())
        except ValueError:
            raise ValidationError("punchType must be 'in' or 'out'", {"punchType": "invalid"})
        reason = require_non_empty(reason, "reason")
        if requested_time.date() != work_date:
            raise ValidationError("requestedTime must fall on the given date", {"requestedTime": "date mismatch"})

        now = now or now_local()
        if requested_time > now:
            raise ValidationError("requestedTime cannot be in the future", {"requestedTime": "in the future"})

        request = MissPunchRequest(
            id=new_id(),
            employee_id=employee.id,
            date=work_date,
            punch_type=kind,
            requested_time=requested_time,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=now,
        )
        approval = draft_approval(
            employee=employee,
            approval_type=ApprovalType.MISS_PUNCH,
            reference_id=request.id,
            now=now,
        )
        self._requests.create_with_approval(request, approval)
        logger.info("Miss-punch request %s (%s) submitted by %s", request.id, kind.value, employee.id)
        return request

    def get(self, request_id: str) -> MissPunchRequest:
        request = self._requests.get_by_id(request_id)
        if not request:
            raise NotFoundError("Miss-punch request not found")
        return request

    def list_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
    ) -> Sequence[MissPunchRequest]:
        return self._requests.list(employee_id=employee_id, status=status)
