from datetime import date, timedelta
from decimal import Decimal

from src.hrms.hrms.core.enums import RequestStatus


def test_stats_without_employees(container):
    stats = container.dashboard_service.stats(today=date(2026, 3, 10))

    assert (stats.total_employees, stats.present_today, stats.pending_leaves) == (0, 0, 0)
    assert stats.attendance_rate == Decimal("0")


def test_stats_count_each_present_employee_once(container, repos, people, fixed_now):
    container.attendance_service.punch_in(people.staff.id, now=fixed_now)
    container.attendance_service.punch_out(people.staff.id, now=fixed_now + timedelta(hours=2))
    container.attendance_service.punch_in(people.staff.id, now=fixed_now + timedelta(hours=3))
    container.attendance_service.punch_in(people.other.id, now=fixed_now)
    container.attendance_service.punch_in(people.manager.id, now=fixed_now - timedelta(days=1))
    repos.employees.set_active(people.manager.id, is_active=False)

    application = container.leave_application_service.submit(
        employee_id=people.staff.id,
        leave_type="Casual",
        from_date=date(2026, 3, 20),
        to_date=date(2026, 3, 20),
        reason="Errand",
        now=fixed_now,
    )

    stats = container.dashboard_service.stats(today=fixed_now.date())

    assert stats.total_employees == 2
    assert stats.present_today == 2
    assert stats.pending_leaves == 1
    assert stats.attendance_rate == Decimal("100.0")
    assert container.leave_application_service.get(application.id).status == RequestStatus.PENDING
