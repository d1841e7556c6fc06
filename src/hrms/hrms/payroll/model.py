from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PayrollInputs:
    """Attendance facts for one employee and month, as fed to a calculator."""

    basic_salary: Decimal
    working_days: int
    present_days: int
    paid_leave_days: int
    overtime_hours: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    lwp_days: int
    overtime_amount: Decimal
    pf_deduction: Decimal
    lwp_deduction: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    id: str
    employee_id: str
    month: int
    year: int
    basic_salary: Decimal
    working_days: int
    present_days: int
    overtime_hours: Decimal
    overtime_amount: Decimal
    pf_deduction: Decimal
    lwp_deduction: Decimal
    net_salary: Decimal
    created_at: Optional[datetime] = None
