from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import FieldVisitStatus


@dataclass(frozen=True)
class FieldWorkVisit:
    id: str
    employee_id: str
    client_name: str
    purpose: str
    start_time: datetime
    status: FieldVisitStatus = FieldVisitStatus.IN_PROGRESS
    end_time: Optional[datetime] = None
    start_latitude: Optional[float] = None
    start_longitude: Optional[float] = None
    start_address: Optional[str] = None
    end_latitude: Optional[float] = None
    end_longitude: Optional[float] = None
    end_address: Optional[str] = None
    distance: Optional[Decimal] = None
    notes: Optional[str] = None

    @property
    def has_start_location(self) -> bool:
        return self.start_latitude is not None and self.start_longitude is not None


@dataclass(frozen=True)
class LocationUpdate:
    success: bool
    is_field_work: bool
    distance_from_office: Decimal
    suspicious: bool = False


@dataclass(frozen=True)
class LocationReport:
    employee_id: str
    from_date: date
    to_date: date
    total_visits: int
    total_distance: Decimal
    total_hours: Decimal
    visits: list[FieldWorkVisit] = field(default_factory=list)


@dataclass(frozen=True)
class LocationHistory:
    field_work: list[FieldWorkVisit] = field(default_factory=list)
    attendance: list[AttendanceRecord] = field(default_factory=list)
