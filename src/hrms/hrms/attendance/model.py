from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One work session of an employee on a day.

    Lifecycle: empty (no punch-in) -> open (punched in) -> closed (punched out).
    """

    id: str
    employee_id: str
    date: date
    status: AttendanceStatus
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    working_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None
    punch_in_latitude: Optional[float] = None
    punch_in_longitude: Optional[float] = None
    punch_in_address: Optional[str] = None
    punch_out_latitude: Optional[float] = None
    punch_out_longitude: Optional[float] = None
    punch_out_address: Optional[str] = None
    is_field_work: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.punch_in is not None and self.punch_out is None

    @property
    def is_closed(self) -> bool:
        return self.punch_in is not None and self.punch_out is not None
