from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import OVERTIME_MULTIPLIER, PF_RATE, STANDARD_WORKDAY_HOURS
from ..model import PayrollBreakdown, PayrollInputs
from .base import PayrollCalculator

_CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic + overtime - PF - leave without pay.

    Daily rate is basic / working days, hourly rate is daily / 8 hours, overtime
    pays 1.5x the hourly rate, PF is 12% of basic and every working day neither
    attended nor covered by approved leave is deducted at the daily rate.
    """

    def __init__(
        self,
        *,
        overtime_multiplier: Decimal = OVERTIME_MULTIPLIER,
        pf_rate: Decimal = PF_RATE,
        workday_hours: Decimal = STANDARD_WORKDAY_HOURS,
    ):
        self._overtime_multiplier = overtime_multiplier
        self._pf_rate = pf_rate
        self._workday_hours = workday_hours

    def calculate(self, inputs: PayrollInputs) -> PayrollBreakdown:
        basic = Decimal(inputs.basic_salary)
        if inputs.working_days > 0:
            daily_rate = basic / Decimal(inputs.working_days)
        else:
            daily_rate = Decimal("0")
        hourly_rate = daily_rate / self._workday_hours

        lwp_days = max(0, inputs.working_days - inputs.present_days - inputs.paid_leave_days)

        overtime_amount = _money(hourly_rate * self._overtime_multiplier * Decimal(inputs.overtime_hours))
        pf_deduction = _money(basic * self._pf_rate)
        lwp_deduction = _money(daily_rate * lwp_days)
        net_salary = _money(basic) + overtime_amount - pf_deduction - lwp_deduction

        return PayrollBreakdown(
            lwp_days=lwp_days,
            overtime_amount=overtime_amount,
            pf_deduction=pf_deduction,
            lwp_deduction=lwp_deduction,
            net_salary=net_salary,
        )
