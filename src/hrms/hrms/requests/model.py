from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PunchType, RequestStatus


@dataclass(frozen=True)
class MissPunchRequest:
    """Employee request to record a punch they forgot to make."""

    id: str
    employee_id: str
    date: date
    punch_type: PunchType
    requested_time: datetime
    reason: str
    status: RequestStatus = RequestStatus.PENDING
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
