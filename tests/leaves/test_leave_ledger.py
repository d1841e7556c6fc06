import pytest

from src.hrms.hrms.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def annual(container):
    return container.leave_ledger.create_leave_type(name="Annual Leave", max_days_per_year=21)


def test_leave_type_names_are_unique(container, annual):
    with pytest.raises(ValidationError):
        container.leave_ledger.create_leave_type(name="Annual Leave", max_days_per_year=10)


def test_carry_forward_limit_ignored_without_carry_forward(container):
    leave_type = container.leave_ledger.create_leave_type(
        name="Sick Leave", max_days_per_year=12, carry_forward=False, carry_forward_limit=5
    )

    assert leave_type.carry_forward_limit == 0


def test_assign_derives_remaining_days(container, people, annual):
    assignment = container.leave_ledger.assign(
        employee_id=people.staff.id,
        leave_type_id=annual.id,
        allocated_days=12,
        used_days=2,
        year=2026,
    )

    assert assignment.remaining_days == 10


@pytest.mark.parametrize("allocated", [2.7, True, float("nan"), "2.5"])
def test_assign_rejects_non_integral_days(container, people, annual, allocated):
    with pytest.raises(ValidationError) as exc:
        container.leave_ledger.assign(
            employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=allocated, year=2026
        )

    assert exc.value.details == {"allocatedDays": "not an integer"}


def test_assign_accepts_whole_float_days(container, people, annual):
    assignment = container.leave_ledger.assign(
        employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=12.0, year=2026.0
    )

    assert (assignment.allocated_days, assignment.year) == (12, 2026)


def test_duplicate_assignment_for_same_year_is_rejected(container, people, annual):
    container.leave_ledger.assign(employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=12, year=2026)

    with pytest.raises(ValidationError):
        container.leave_ledger.assign(employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=5, year=2026)

    # another year is a separate balance
    container.leave_ledger.assign(employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=5, year=2027)


def test_assign_requires_known_employee_and_type(container, people, annual):
    with pytest.raises(NotFoundError):
        container.leave_ledger.assign(employee_id="ghost", leave_type_id=annual.id, allocated_days=1, year=2026)
    with pytest.raises(NotFoundError):
        container.leave_ledger.assign(employee_id=people.staff.id, leave_type_id="ghost", allocated_days=1, year=2026)


def test_update_recomputes_remaining_from_stored_counters(container, people, annual):
    assignment = container.leave_ledger.assign(
        employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=12, year=2026
    )

    updated = container.leave_ledger.update_assignment(assignment.id, used_days=4)
    assert (updated.allocated_days, updated.used_days, updated.remaining_days) == (12, 4, 8)

    updated = container.leave_ledger.update_assignment(assignment.id, allocated_days=15)
    assert (updated.allocated_days, updated.used_days, updated.remaining_days) == (15, 4, 11)


def test_update_unknown_assignment(container):
    with pytest.raises(NotFoundError):
        container.leave_ledger.update_assignment("missing", used_days=1)


def test_bulk_assign_skips_existing_and_duplicates(container, people, annual):
    container.leave_ledger.assign(employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=12, year=2026)

    result = container.leave_ledger.bulk_assign(
        employee_ids=[people.staff.id, people.other.id, people.other.id, people.manager.id],
        leave_type_id=annual.id,
        allocated_days=20,
        year=2026,
    )

    assert sorted(a.employee_id for a in result.created) == sorted([people.other.id, people.manager.id])
    assert result.skipped == [people.staff.id]
    assert all(a.remaining_days == 20 for a in result.created)


def test_bulk_assign_requires_employees(container, annual):
    with pytest.raises(ValidationError):
        container.leave_ledger.bulk_assign(employee_ids=[], leave_type_id=annual.id, allocated_days=5, year=2026)


def test_record_usage_without_assignment_is_not_an_error(container, people, annual):
    assert container.leave_ledger.record_usage(
        employee_id=people.staff.id, leave_type_id=annual.id, year=2026, days=2
    ) is False
