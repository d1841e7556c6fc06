from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.hrms.hrms.core.enums import FieldVisitStatus
from src.hrms.hrms.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hrms.hrms.gps.geo import GPSCoordinates

OFFICE = GPSCoordinates(28.6139, 77.2090)
NORTH = GPSCoordinates(28.7139, 77.2090)  # ~11.12 km north of the office


def _start(container, employee_id, now, coordinates=OFFICE):
    return container.gps_service.start_field_work(
        employee_id=employee_id,
        client_name="Acme",
        purpose="Demo",
        coordinates=coordinates,
        now=now,
    )


def test_update_location_at_office(container, people, fixed_now):
    result = container.gps_service.update_location(employee_id=people.staff.id, coordinates=OFFICE, now=fixed_now)

    assert result.success
    assert not result.is_field_work
    assert result.distance_from_office == Decimal("0.00")
    assert not result.suspicious


def test_update_location_tracks_active_visit(container, repos, people, fixed_now):
    visit = _start(container, people.staff.id, fixed_now)

    result = container.gps_service.update_location(
        employee_id=people.staff.id,
        coordinates=NORTH,
        is_field_work=True,
        address="Client site",
        now=fixed_now + timedelta(hours=1),
    )

    assert result.is_field_work
    assert result.distance_from_office == Decimal("11.12")
    stored = repos.field_visits.get_by_id(visit.id)
    assert stored.distance == Decimal("11.12")
    assert stored.end_address == "Client site"
    assert stored.status == FieldVisitStatus.IN_PROGRESS


def test_impossible_speed_is_flagged_but_accepted(container, people, fixed_now):
    _start(container, people.staff.id, fixed_now)

    result = container.gps_service.update_location(
        employee_id=people.staff.id,
        coordinates=NORTH,
        now=fixed_now + timedelta(minutes=1),
    )

    assert result.success
    assert result.suspicious


def test_update_location_writes_open_session_punch_out_slot(container, repos, people, fixed_now):
    record = container.attendance_service.punch_in(people.staff.id, now=fixed_now, location=OFFICE)

    container.gps_service.update_location(
        employee_id=people.staff.id,
        coordinates=NORTH,
        now=fixed_now + timedelta(hours=2),
    )

    stored = repos.attendance.get_by_id(record.id)
    assert stored.punch_in_latitude == OFFICE.latitude
    assert stored.punch_out_latitude == NORTH.latitude


def test_update_location_rejects_invalid_coordinates(container, people, fixed_now):
    with pytest.raises(ValidationError):
        container.gps_service.update_location(
            employee_id=people.staff.id, coordinates=GPSCoordinates(123.0, 0.0), now=fixed_now
        )


def test_end_field_work_computes_distance_once(container, people, fixed_now):
    visit = _start(container, people.staff.id, fixed_now)

    ended = container.gps_service.end_field_work(
        visit.id, coordinates=NORTH, notes=" signed ", now=fixed_now + timedelta(hours=2)
    )

    assert ended.status == FieldVisitStatus.COMPLETED
    assert ended.distance == Decimal("11.12")
    assert ended.notes == "signed"
    with pytest.raises(ValidationError):
        container.gps_service.end_field_work(visit.id, coordinates=NORTH)


def test_end_unknown_visit(container):
    with pytest.raises(NotFoundError):
        container.gps_service.end_field_work("missing")


def test_end_field_work_of_someone_else_is_refused(container, people, fixed_now):
    visit = _start(container, people.other.id, fixed_now)

    with pytest.raises(AuthorizationError):
        container.gps_service.end_field_work(visit.id, employee_id=people.staff.id, coordinates=NORTH)

    assert container.gps_service.end_field_work(visit.id, employee_id=people.other.id).status == (
        FieldVisitStatus.COMPLETED
    )


def test_start_requires_client_and_purpose(container, people, fixed_now):
    with pytest.raises(ValidationError):
        container.gps_service.start_field_work(
            employee_id=people.staff.id, client_name="", purpose="Demo", now=fixed_now
        )


def test_location_report_totals(container, people):
    first = _start(container, people.staff.id, datetime(2026, 3, 2, 10, 0))
    container.gps_service.end_field_work(first.id, coordinates=NORTH, now=datetime(2026, 3, 2, 11, 0))
    second = _start(container, people.staff.id, datetime(2026, 3, 3, 14, 0))
    container.gps_service.end_field_work(second.id, coordinates=OFFICE, now=datetime(2026, 3, 3, 14, 30))
    _start(container, people.staff.id, datetime(2026, 3, 20, 9, 0))

    report = container.gps_service.location_report(
        people.staff.id, from_date=date(2026, 3, 1), to_date=date(2026, 3, 7)
    )

    assert report.total_visits == 2
    assert report.total_distance == Decimal("11.12")
    assert report.total_hours == Decimal("1.50")


def test_location_report_rejects_inverted_range(container, people):
    with pytest.raises(ValidationError):
        container.gps_service.location_report(people.staff.id, from_date=date(2026, 3, 7), to_date=date(2026, 3, 1))


def test_location_history_window(container, people, fixed_now):
    _start(container, people.staff.id, fixed_now - timedelta(days=2))
    _start(container, people.staff.id, fixed_now - timedelta(days=10))
    container.attendance_service.punch_in(people.staff.id, now=fixed_now, location=OFFICE)

    history = container.gps_service.location_history(people.staff.id, days=7, now=fixed_now + timedelta(hours=1))

    assert len(history.field_work) == 1
    assert len(history.attendance) == 1
