from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    code: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Employee:
    """Employee master record.

    `salary` is the monthly basic used by payroll. Employees are never deleted,
    only deactivated (`is_active=False`).
    """

    id: str
    employee_code: str
    name: str
    email: str
    department_id: str
    designation: str
    salary: Decimal
    join_date: date
    phone: Optional[str] = None
    pf_number: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
