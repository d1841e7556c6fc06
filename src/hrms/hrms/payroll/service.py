from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..attendance.time_accounting import round_hours
from ..common.datetime_utils import iter_days, month_bounds
from ..common.validators import new_id, require_int
from ..core.constants import WORK_WEEKDAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveApplicationRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollInputs, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def working_days_in(first: date, last: date) -> list[date]:
    return [d for d in iter_days(first, last) if d.weekday() in WORK_WEEKDAYS]


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leave_applications: LeaveApplicationRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._leave_applications = leave_applications
        self._calculator = calculator or StandardPayrollCalculator()

    def collect_inputs(self, employee: Employee, *, month: int, year: int) -> PayrollInputs:
        first, last = month_bounds(year, month)
        working = set(working_days_in(first, last))

        records = self._attendance.list_for_period(employee.id, first, last)
        present = {r.date for r in records if r.status == AttendanceStatus.PRESENT}
        overtime = sum((r.overtime_hours or Decimal("0") for r in records), Decimal("0"))

        paid_leave: set[date] = set()
        for application in self._leave_applications.list_approved_overlapping(employee.id, first, last):
            paid_leave.update(d for d in iter_days(application.from_date, application.to_date) if d in working)
        # A day both attended and on leave counts once, as attended.
        paid_leave -= present

        return PayrollInputs(
            basic_salary=Decimal(employee.salary),
            working_days=len(working),
            present_days=len(present),
            paid_leave_days=len(paid_leave),
            overtime_hours=round_hours(overtime),
        )

    def generate_for_employee(self, employee: Employee, *, month: int, year: int) -> PayrollRecord:
        inputs = self.collect_inputs(employee, month=month, year=year)
        breakdown = self._calculator.calculate(inputs)
        record = PayrollRecord(
            id=new_id(),
            employee_id=employee.id,
            month=month,
            year=year,
            basic_salary=inputs.basic_salary,
            working_days=inputs.working_days,
            present_days=inputs.present_days,
            overtime_hours=inputs.overtime_hours,
            overtime_amount=breakdown.overtime_amount,
            pf_deduction=breakdown.pf_deduction,
            lwp_deduction=breakdown.lwp_deduction,
            net_salary=breakdown.net_salary,
        )
        self._payroll.replace(record)
        return record

    def generate(self, *, month: Any, year: Any, employee_id: Optional[str] = None) -> Sequence[PayrollRecord]:
        month = require_int(month, "month", min_value=1)
        year = require_int(year, "year", min_value=1)
        month_bounds(year, month)

        if employee_id:
            employee = self._employees.get_by_id(employee_id)
            if not employee or not employee.is_active:
                raise NotFoundError("Employee not found")
            employees = [employee]
        else:
            employees = list(self._employees.list_active(limit=10_000))

        records = [self.generate_for_employee(e, month=month, year=year) for e in employees]
        logger.info("Generated payroll for %d employee(s) for %02d/%d", len(records), month, year)
        return records

    def list_records(self, *, employee_id: Optional[str] = None) -> Sequence[PayrollRecord]:
        return self._payroll.list(employee_id=employee_id)
