from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.enums import ApprovalType, RequestStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..leaves.service import LeaveApplicationService
from ..requests.repository import MissPunchRepository
from .model import Approval
from .repository import ApprovalRepository

logger = logging.getLogger(__name__)


class ApprovalRouter:
    """Shared pending -> approved | rejected state machine for leave, miss-punch and overtime.

    A decision is terminal. Deciding an approval also moves the referenced
    request and applies its effect once approved: granted leave is charged to
    the ledger and a granted miss-punch is written to attendance.
    """

    def __init__(
        self,
        approvals: ApprovalRepository,
        *,
        leave_applications: LeaveApplicationService,
        miss_punches: MissPunchRepository,
        attendance: AttendanceService,
    ):
        self._approvals = approvals
        self._leave_applications = leave_applications
        self._miss_punches = miss_punches
        self._attendance = attendance

    def get(self, approval_id: str) -> Approval:
        approval = self._approvals.get_by_id(approval_id)
        if not approval:
            raise NotFoundError("Approval not found")
        return approval

    def list_all(self) -> Sequence[Approval]:
        return self._approvals.list()

    def list_pending(self) -> Sequence[Approval]:
        return self._approvals.list(status=RequestStatus.PENDING)

    @staticmethod
    def _parse_decision(status) -> RequestStatus:
        try:
            decision = RequestStatus(str(status or "").strip().lower())
        except ValueError:
            decision = None
        if decision not in {RequestStatus.APPROVED, RequestStatus.REJECTED}:
            raise ValidationError("status must be 'approved' or 'rejected'", {"status": "invalid"})
        return decision

    def decide(
        self,
        approval_id: str,
        *,
        status,
        comments: Optional[str] = None,
        decided_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Approval:
        decision = self._parse_decision(status)
        approval = self.get(approval_id)
        if approval.status != RequestStatus.PENDING:
            raise ValidationError(f"Approval already {approval.status.value}")
        if decided_by and decided_by == approval.employee_id:
            raise AuthorizationError("You cannot decide your own request")

        comments = (comments or "").strip() or None
        now = now or now_local()

        application = None
        if decision == RequestStatus.APPROVED and approval.type == ApprovalType.LEAVE:
            application = self._leave_applications.get(approval.reference_id)
            self._leave_applications.ensure_balance(application)

        if decision == RequestStatus.APPROVED and approval.type == ApprovalType.MISS_PUNCH:
            # Correction first, so a request that cannot be applied stays pending.
            request = self._miss_punches.get_by_id(approval.reference_id)
            if not request:
                raise NotFoundError("Miss-punch request not found")
            self._attendance.apply_miss_punch(
                employee_id=request.employee_id,
                work_date=request.date,
                punch_type=request.punch_type,
                requested_time=request.requested_time,
            )

        decided = self._approvals.decide(
            approval.id,
            status=decision,
            comments=comments,
            decided_by=decided_by,
            decided_at=now,
        )
        if not decided:
            raise ValidationError("Approval has already been decided")

        if application is not None:
            self._leave_applications.consume_balance(application)

        logger.info(
            "Approval %s (%s %s) %s by %s",
            approval.id,
            approval.type.value,
            approval.reference_id,
            decision.value,
            decided_by or "-",
        )
        return self.get(approval.id)
