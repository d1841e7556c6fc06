from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..approvals.model import Approval
from ..approvals.repository import ApprovalRepository
from ..approvals.routing import draft_approval
from ..common.datetime_utils import now_local
from ..common.validators import new_id
from ..core.enums import ApprovalType, AttendanceStatus, PunchType
from ..core.exceptions import AlreadyPunchedIn, AuthorizationError, MustPunchInFirst, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..gps.geo import GPSCoordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .time_accounting import compute_working_time

logger = logging.getLogger(__name__)


class AttendanceService:
    """Punch in / punch out with at most one open session per employee per day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        approvals: ApprovalRepository,
    ):
        self._attendance = attendance
        self._employees = employees
        self._approvals = approvals

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        return employee

    def punch_in(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        location: Optional[GPSCoordinates] = None,
        address: Optional[str] = None,
    ) -> AttendanceRecord:
        employee = self._require_employee(employee_id)
        now = now or now_local()
        today = now.date()
        lat = location.latitude if location else None
        lon = location.longitude if location else None

        latest = self._attendance.get_latest_for_date(employee.id, today)
        if latest and latest.is_open:
            raise AlreadyPunchedIn()

        if latest and latest.punch_in is None:
            # Placeholder row (e.g. marked absent earlier) becomes today's session.
            if not self._attendance.start_placeholder(latest.id, punch_in=now, latitude=lat, longitude=lon, address=address):
                raise AlreadyPunchedIn()
            record = self._attendance.get_by_id(latest.id)
        else:
            record = AttendanceRecord(
                id=new_id(),
                employee_id=employee.id,
                date=today,
                status=AttendanceStatus.PRESENT,
                punch_in=now,
                punch_in_latitude=lat,
                punch_in_longitude=lon,
                punch_in_address=address,
            )
            if not self._attendance.create_punch_in(record):
                raise AlreadyPunchedIn()

        logger.info("Employee %s punched in at %s", employee.id, now.isoformat())
        return record

    def punch_out(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        location: Optional[GPSCoordinates] = None,
        address: Optional[str] = None,
    ) -> AttendanceRecord:
        employee = self._require_employee(employee_id)
        now = now or now_local()

        open_record = self._attendance.get_open_for_date(employee.id, now.date())
        if not open_record:
            raise MustPunchInFirst()

        worked = compute_working_time(open_record.punch_in, now)
        if worked.working_hours < 0:
            logger.warning(
                "Punch-out before punch-in for employee %s (record %s): %s hours",
                employee.id,
                open_record.id,
                worked.working_hours,
            )

        closed = self._attendance.close_session(
            open_record.id,
            punch_out=now,
            working_hours=worked.working_hours,
            overtime_hours=worked.overtime_hours,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            address=address,
        )
        if not closed:
            # Another request closed it first.
            raise MustPunchInFirst()

        logger.info("Employee %s punched out at %s (%s h)", employee.id, now.isoformat(), worked.working_hours)
        return self._attendance.get_by_id(open_record.id)

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.list_records(employee_id=employee_id, work_date=work_date)

    def today(self, work_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        return self._attendance.list_records(work_date=work_date or now_local().date())

    def request_overtime_approval(
        self,
        record_id: str,
        *,
        employee_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Approval:
        """Open an overtime approval for a closed session; `employee_id` restricts it to their own records."""

        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if employee_id is not None and record.employee_id != employee_id:
            raise AuthorizationError("Employees may only request overtime for their own attendance")
        if not record.is_closed:
            raise ValidationError("Overtime can only be requested for a completed session")
        if not record.overtime_hours or record.overtime_hours <= 0:
            raise ValidationError("No overtime recorded for this session")
        if self._approvals.find_by_reference(ApprovalType.OVERTIME, record.id):
            raise ValidationError("Overtime approval already requested")

        employee = self._require_employee(record.employee_id)
        approval = draft_approval(
            employee=employee,
            approval_type=ApprovalType.OVERTIME,
            reference_id=record.id,
            now=now or now_local(),
        )
        self._approvals.create(approval)
        logger.info("Overtime approval %s requested for record %s", approval.id, record.id)
        return approval

    def apply_miss_punch(
        self,
        *,
        employee_id: str,
        work_date: date,
        punch_type: PunchType,
        requested_time: datetime,
    ) -> AttendanceRecord:
        """Apply an approved miss-punch correction to the employee's attendance on `work_date`."""

        if punch_type == PunchType.IN:
            target = self._attendance.get_latest_for_date(employee_id, work_date)
            if target is None:
                record = AttendanceRecord(
                    id=new_id(),
                    employee_id=employee_id,
                    date=work_date,
                    status=AttendanceStatus.PRESENT,
                    punch_in=requested_time,
                )
                if not self._attendance.create_punch_in(record):
                    raise ValidationError("Employee already has an open session on that date")
                return record
            punch_in, punch_out = requested_time, target.punch_out
        else:
            target = self._attendance.get_open_for_date(employee_id, work_date) or self._attendance.get_latest_for_date(
                employee_id, work_date
            )
            if target is None or target.punch_in is None:
                raise ValidationError("No punch-in recorded on that date")
            punch_in, punch_out = target.punch_in, requested_time

        working_hours = overtime_hours = None
        if punch_out is not None:
            if punch_out < punch_in:
                raise ValidationError("Punch-out cannot be earlier than punch-in")
            worked = compute_working_time(punch_in, punch_out)
            working_hours, overtime_hours = worked.working_hours, worked.overtime_hours

        ok = self._attendance.amend_times(
            target.id,
            punch_in=punch_in,
            punch_out=punch_out,
            working_hours=working_hours,
            overtime_hours=overtime_hours,
            status=AttendanceStatus.PRESENT,
        )
        if not ok:
            raise ValidationError("Attendance correction could not be applied")
        return self._attendance.get_by_id(target.id)
