from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..approvals.model import Approval
from ..core.enums import RequestStatus
from .model import MissPunchRequest


class MissPunchRepository(Protocol):
    def create_with_approval(self, request: MissPunchRequest, approval: Approval) -> None:
        raise NotImplementedError

    def get_by_id(self, request_id: str) -> Optional[MissPunchRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[MissPunchRequest]:
        raise NotImplementedError
