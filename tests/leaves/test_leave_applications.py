from datetime import date

import pytest

from src.hrms.hrms.core.enums import ApprovalType, RequestStatus
from src.hrms.hrms.core.exceptions import NotFoundError, ValidationError
from src.hrms.hrms.leaves.service import count_leave_days


@pytest.fixture
def annual(container):
    return container.leave_ledger.create_leave_type(name="Annual Leave", max_days_per_year=21)


def test_count_leave_days_is_inclusive():
    assert count_leave_days(date(2026, 3, 2), date(2026, 3, 2)) == 1
    assert count_leave_days(date(2026, 3, 30), date(2026, 4, 2)) == 4
    with pytest.raises(ValidationError):
        count_leave_days(date(2026, 3, 5), date(2026, 3, 4))


def test_submit_opens_pending_application_and_approval(container, store, people, annual, fixed_now):
    application = container.leave_application_service.submit(
        employee_id=people.staff.id,
        leave_type_id=annual.id,
        from_date=date(2026, 3, 16),
        to_date=date(2026, 3, 18),
        reason="Family trip",
        now=fixed_now,
    )

    assert application.status == RequestStatus.PENDING
    assert application.total_days == 3
    assert application.leave_type == "Annual Leave"

    approvals = list(store.approvals.values())
    assert len(approvals) == 1
    assert approvals[0].type == ApprovalType.LEAVE
    assert approvals[0].reference_id == application.id
    assert approvals[0].approver_id == people.manager.id


def test_employee_without_manager_is_their_own_placeholder_approver(container, store, people, annual, fixed_now):
    container.leave_application_service.submit(
        employee_id=people.manager.id,
        leave_type_id=annual.id,
        from_date=date(2026, 3, 16),
        to_date=date(2026, 3, 16),
        reason="Errand",
        now=fixed_now,
    )

    (approval,) = store.approvals.values()
    assert approval.approver_id == people.manager.id


def test_submit_rejects_request_above_remaining_balance(container, people, annual, fixed_now):
    container.leave_ledger.assign(
        employee_id=people.staff.id, leave_type_id=annual.id, allocated_days=5, used_days=3, year=2026
    )

    with pytest.raises(ValidationError):
        container.leave_application_service.submit(
            employee_id=people.staff.id,
            leave_type_id=annual.id,
            from_date=date(2026, 3, 16),
            to_date=date(2026, 3, 18),
            reason="Too long",
            now=fixed_now,
        )


def test_free_text_leave_type_is_accepted(container, people, fixed_now):
    application = container.leave_application_service.submit(
        employee_id=people.staff.id,
        leave_type="Bereavement",
        from_date=date(2026, 3, 16),
        to_date=date(2026, 3, 16),
        reason="Funeral",
        now=fixed_now,
    )

    assert application.leave_type_id is None
    assert application.leave_type == "Bereavement"


def test_leave_type_is_required(container, people, fixed_now):
    with pytest.raises(ValidationError):
        container.leave_application_service.submit(
            employee_id=people.staff.id,
            from_date=date(2026, 3, 16),
            to_date=date(2026, 3, 16),
            reason="Something",
            now=fixed_now,
        )


def test_reason_is_required(container, people, annual, fixed_now):
    with pytest.raises(ValidationError):
        container.leave_application_service.submit(
            employee_id=people.staff.id,
            leave_type_id=annual.id,
            from_date=date(2026, 3, 16),
            to_date=date(2026, 3, 16),
            reason="  ",
            now=fixed_now,
        )


def test_get_unknown_application(container):
    with pytest.raises(NotFoundError):
        container.leave_application_service.get("missing")
