from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import STANDARD_WORKDAY_HOURS

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class WorkedTime:
    working_hours: Decimal
    overtime_hours: Decimal


def round_hours(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def compute_working_time(
    punch_in: datetime,
    punch_out: datetime,
    *,
    standard_hours: Decimal = STANDARD_WORKDAY_HOURS,
) -> WorkedTime:
    """Working hours between two punches, plus hours beyond the standard day.

    No timezone normalization. A punch-out earlier than the punch-in yields a
    negative working time and zero overtime.
    """

    elapsed = punch_out - punch_in
    seconds = Decimal(elapsed.days * 86400 + elapsed.seconds) + Decimal(elapsed.microseconds) / Decimal(1_000_000)
    working = round_hours(seconds / Decimal(3600))
    overtime = max(Decimal("0.00"), working - standard_hours)
    return WorkedTime(working_hours=working, overtime_hours=round_hours(overtime))
