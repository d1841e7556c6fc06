from decimal import Decimal

from src.hrms.hrms.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.hrms.hrms.payroll.model import PayrollInputs


def test_net_is_basic_plus_overtime_minus_pf_and_lwp():
    inputs = PayrollInputs(
        basic_salary=Decimal("22000"),
        working_days=22,
        present_days=20,
        paid_leave_days=1,
        overtime_hours=Decimal("4"),
    )

    result = StandardPayrollCalculator().calculate(inputs)

    assert result.lwp_days == 1
    assert result.overtime_amount == Decimal("750.00")
    assert result.pf_deduction == Decimal("2640.00")
    assert result.lwp_deduction == Decimal("1000.00")
    assert result.net_salary == Decimal("19110.00")


def test_full_attendance_has_no_lwp():
    inputs = PayrollInputs(
        basic_salary=Decimal("50000"),
        working_days=20,
        present_days=18,
        paid_leave_days=2,
        overtime_hours=Decimal("0"),
    )

    result = StandardPayrollCalculator().calculate(inputs)

    assert result.lwp_days == 0
    assert result.net_salary == Decimal("44000.00")


def test_extra_days_never_make_lwp_negative():
    inputs = PayrollInputs(
        basic_salary=Decimal("10000"),
        working_days=20,
        present_days=22,
        paid_leave_days=0,
        overtime_hours=Decimal("0"),
    )

    assert StandardPayrollCalculator().calculate(inputs).lwp_days == 0


def test_zero_working_days_only_deducts_pf():
    inputs = PayrollInputs(
        basic_salary=Decimal("10000"),
        working_days=0,
        present_days=0,
        paid_leave_days=0,
        overtime_hours=Decimal("3"),
    )

    result = StandardPayrollCalculator().calculate(inputs)

    assert result.overtime_amount == Decimal("0.00")
    assert result.net_salary == Decimal("8800.00")


def test_rates_are_configurable():
    calc = StandardPayrollCalculator(pf_rate=Decimal("0"), overtime_multiplier=Decimal("2"))
    inputs = PayrollInputs(
        basic_salary=Decimal("16000"),
        working_days=20,
        present_days=20,
        paid_leave_days=0,
        overtime_hours=Decimal("1"),
    )

    result = calc.calculate(inputs)

    assert result.overtime_amount == Decimal("200.00")
    assert result.net_salary == Decimal("16200.00")
