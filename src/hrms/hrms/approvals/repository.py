from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalType, RequestStatus
from .model import Approval


class ApprovalRepository(Protocol):
    def create(self, approval: Approval) -> None:
        raise NotImplementedError

    def get_by_id(self, approval_id: str) -> Optional[Approval]:
        raise NotImplementedError

    def find_by_reference(self, approval_type: ApprovalType, reference_id: str) -> Optional[Approval]:
        raise NotImplementedError

    def list(self, *, status: Optional[RequestStatus] = None, limit: int = 200) -> Sequence[Approval]:
        raise NotImplementedError

    def decide(
        self,
        approval_id: str,
        *,
        status: RequestStatus,
        comments: Optional[str],
        decided_by: Optional[str],
        decided_at: datetime,
    ) -> bool:
        """Move a pending approval to `status` together with the request it references.

        Returns False when the approval is no longer pending.
        """
        raise NotImplementedError
