from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import new_id, require_int, require_non_empty
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import FieldVisitStatus, PunchType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .geo import GPSCoordinates, distance_between, is_suspicious_movement, is_valid_coordinates
from .model import FieldWorkVisit, LocationHistory, LocationReport, LocationUpdate
from .repository import FieldVisitRepository

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _km(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


class GPSTrackingService:
    """Field-work visits and live location updates.

    Implausible jumps (faster than the configured speed) are logged and never
    rejected: fast travel can be legitimate.
    """

    def __init__(
        self,
        visits: FieldVisitRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        office: GPSCoordinates,
    ):
        self._visits = visits
        self._attendance = attendance
        self._employees = employees
        self._office = office

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _require_valid(coordinates: Optional[GPSCoordinates]) -> None:
        if coordinates is not None and not is_valid_coordinates(coordinates.latitude, coordinates.longitude):
            raise ValidationError("Invalid GPS coordinates")

    def last_known_location(self, employee_id: str, *, today: date) -> Optional[GPSCoordinates]:
        """Start of the latest field visit, else today's punch-in location."""

        visit = self._visits.get_latest_for_employee(employee_id)
        if visit and visit.has_start_location:
            return GPSCoordinates(visit.start_latitude, visit.start_longitude, timestamp=visit.start_time)

        record = self._attendance.get_latest_for_date(employee_id, today)
        if record and record.punch_in_latitude is not None and record.punch_in_longitude is not None:
            return GPSCoordinates(
                record.punch_in_latitude,
                record.punch_in_longitude,
                timestamp=record.punch_in or record.created_at,
            )
        return None

    def update_location(
        self,
        *,
        employee_id: str,
        coordinates: GPSCoordinates,
        address: Optional[str] = None,
        is_field_work: bool = False,
        now: Optional[datetime] = None,
    ) -> LocationUpdate:
        if coordinates is None:
            raise ValidationError("Invalid GPS coordinates")
        self._require_valid(coordinates)
        now = now or now_local()
        if coordinates.timestamp is None:
            coordinates = GPSCoordinates(coordinates.latitude, coordinates.longitude, timestamp=now, accuracy=coordinates.accuracy)

        last = self.last_known_location(employee_id, today=now.date())
        suspicious = bool(last and is_suspicious_movement(last, coordinates))
        if suspicious:
            logger.warning("Suspicious GPS movement detected for employee %s", employee_id)

        employee = self._require_employee(employee_id)

        if is_field_work:
            active = self._visits.get_active_for_employee(employee.id)
            if active:
                distance = Decimal("0.00")
                if active.has_start_location:
                    start = GPSCoordinates(active.start_latitude, active.start_longitude)
                    distance = _km(distance_between(start, coordinates))
                self._visits.update_end_location(
                    active.id,
                    latitude=coordinates.latitude,
                    longitude=coordinates.longitude,
                    address=address,
                    distance=distance,
                )

        in_field = self._visits.get_active_for_employee(employee.id) is not None
        record = self._attendance.get_latest_for_date(employee.id, now.date())
        if record and (record.is_open or record.punch_in is None):
            # Open session: position is where they will punch out from.
            slot = PunchType.OUT if record.is_open else PunchType.IN
            self._attendance.update_location(
                record.id,
                slot=slot,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                address=address,
                is_field_work=in_field,
            )

        logger.debug("Location updated for %s: %s, %s", employee.id, coordinates.latitude, coordinates.longitude)
        return LocationUpdate(
            success=True,
            is_field_work=in_field,
            distance_from_office=_km(distance_between(coordinates, self._office)),
            suspicious=suspicious,
        )

    def start_field_work(
        self,
        *,
        employee_id: str,
        client_name: str,
        purpose: str,
        coordinates: Optional[GPSCoordinates] = None,
        address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FieldWorkVisit:
        employee = self._require_employee(employee_id)
        client_name = require_non_empty(client_name, "clientName")
        purpose = require_non_empty(purpose, "purpose")
        self._require_valid(coordinates)

        visit = FieldWorkVisit(
            id=new_id(),
            employee_id=employee.id,
            client_name=client_name,
            purpose=purpose,
            start_time=now or now_local(),
            status=FieldVisitStatus.IN_PROGRESS,
            start_latitude=coordinates.latitude if coordinates else None,
            start_longitude=coordinates.longitude if coordinates else None,
            start_address=address,
        )
        self._visits.create(visit)
        logger.info("Field work started for employee %s: %s", employee.id, client_name)
        return visit

    def end_field_work(
        self,
        visit_id: str,
        *,
        employee_id: Optional[str] = None,
        coordinates: Optional[GPSCoordinates] = None,
        address: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FieldWorkVisit:
        visit = self._visits.get_by_id(visit_id)
        if not visit:
            raise NotFoundError("Field work visit not found")
        if employee_id is not None and visit.employee_id != employee_id:
            raise AuthorizationError("Employees may only end their own field work")
        if visit.status == FieldVisitStatus.COMPLETED:
            raise ValidationError("Field work visit already completed")
        self._require_valid(coordinates)

        distance = Decimal("0.00")
        if visit.has_start_location and coordinates is not None:
            start = GPSCoordinates(visit.start_latitude, visit.start_longitude)
            distance = _km(distance_between(start, coordinates))

        completed = self._visits.complete(
            visit.id,
            end_time=now or now_local(),
            latitude=coordinates.latitude if coordinates else None,
            longitude=coordinates.longitude if coordinates else None,
            address=address,
            distance=distance,
            notes=(notes or "").strip() or None,
        )
        if not completed:
            raise ValidationError("Field work visit already completed")

        logger.info("Field work completed for visit %s, total distance: %s km", visit.id, distance)
        return self._visits.get_by_id(visit.id)

    def location_history(
        self,
        employee_id: str,
        *,
        days: int = DEFAULT_HISTORY_DAYS,
        now: Optional[datetime] = None,
    ) -> LocationHistory:
        days = require_int(days, "days", min_value=1)
        employee = self._require_employee(employee_id)
        now = now or now_local()
        since = now - timedelta(days=days)

        visits = self._visits.list_started_between(employee.id, since, now + timedelta(seconds=1))
        records = [
            r
            for r in self._attendance.list_for_period(employee.id, since.date(), now.date())
            if r.punch_in_latitude is not None or r.punch_out_latitude is not None
        ]
        records.sort(key=lambda r: r.date, reverse=True)
        return LocationHistory(field_work=list(visits), attendance=records)

    def location_report(self, employee_id: str, *, from_date: date, to_date: date) -> LocationReport:
        if to_date < from_date:
            raise ValidationError("toDate must be on or after fromDate", {"toDate": "before fromDate"})
        employee = self._require_employee(employee_id)

        start = datetime.combine(from_date, time.min)
        end = datetime.combine(to_date + timedelta(days=1), time.min)
        visits = list(self._visits.list_started_between(employee.id, start, end))

        total_distance = sum((v.distance or Decimal("0") for v in visits), Decimal("0"))
        total_seconds = sum(
            ((v.end_time - v.start_time).total_seconds() for v in visits if v.end_time is not None),
            0.0,
        )
        return LocationReport(
            employee_id=employee.id,
            from_date=from_date,
            to_date=to_date,
            total_visits=len(visits),
            total_distance=total_distance.quantize(_CENTS, rounding=ROUND_HALF_UP),
            total_hours=Decimal(str(total_seconds / 3600)).quantize(_CENTS, rounding=ROUND_HALF_UP),
            visits=visits,
        )
