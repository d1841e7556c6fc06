from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import RequestStatus
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveApplicationRepository
from .model import DashboardStats

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


class DashboardService:
    """Headline numbers for the HR dashboard."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leave_applications: LeaveApplicationRepository,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leave_applications = leave_applications

    def stats(self, *, today: Optional[date] = None) -> DashboardStats:
        today = today or now_local().date()
        total = self._employees.count_active()
        present = self._attendance.count_present(today)
        pending = self._leave_applications.count_by_status(RequestStatus.PENDING)

        rate = Decimal("0")
        if total > 0:
            rate = (Decimal(present) * 100 / Decimal(total)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)

        logger.debug("Dashboard stats for %s: %d/%d present, %d pending leave(s)", today, present, total, pending)
        return DashboardStats(
            total_employees=total,
            present_today=present,
            pending_leaves=pending,
            attendance_rate=rate,
        )
