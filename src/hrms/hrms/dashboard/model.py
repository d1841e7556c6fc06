from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    pending_leaves: int
    attendance_rate: Decimal
