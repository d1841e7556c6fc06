from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, PunchType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        """Most recently created record of the employee on `work_date`."""
        raise NotImplementedError

    def get_open_for_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        """Record with punch-in set and punch-out empty, newest punch-in first."""
        raise NotImplementedError

    def create_punch_in(self, record: AttendanceRecord) -> bool:
        """Insert an open record. False when the employee already has an open record that day."""
        raise NotImplementedError

    def start_placeholder(
        self,
        record_id: str,
        *,
        punch_in: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        address: Optional[str] = None,
    ) -> bool:
        """Set punch-in on a record that has none. False when it already had one."""
        raise NotImplementedError

    def close_session(
        self,
        record_id: str,
        *,
        punch_out: datetime,
        working_hours: Decimal,
        overtime_hours: Decimal,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        address: Optional[str] = None,
    ) -> bool:
        """Set punch-out only if the record is still open. Missing location keeps the last tracked one."""
        raise NotImplementedError

    def amend_times(
        self,
        record_id: str,
        *,
        punch_in: Optional[datetime],
        punch_out: Optional[datetime],
        working_hours: Optional[Decimal],
        overtime_hours: Optional[Decimal],
        status: AttendanceStatus,
    ) -> bool:
        raise NotImplementedError

    def update_location(
        self,
        record_id: str,
        *,
        slot: PunchType,
        latitude: float,
        longitude: float,
        address: Optional[str],
        is_field_work: bool,
    ) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        work_date: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_period(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_present(self, work_date: date) -> int:
        """Distinct employees marked present on `work_date`."""
        raise NotImplementedError
