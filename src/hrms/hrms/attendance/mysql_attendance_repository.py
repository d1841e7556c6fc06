from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import AttendanceStatus, PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_float, db_cursor, fetchall, fetchone, is_duplicate_key, where_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    id, employee_id, date, punch_in, punch_out, working_hours, overtime_hours, status,
    punch_in_latitude, punch_in_longitude, punch_in_address,
    punch_out_latitude, punch_out_longitude, punch_out_address,
    is_field_work, created_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=r["id"],
        employee_id=r["employee_id"],
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        punch_in=r.get("punch_in"),
        punch_out=r.get("punch_out"),
        working_hours=as_decimal(r.get("working_hours")),
        overtime_hours=as_decimal(r.get("overtime_hours")),
        punch_in_latitude=as_float(r.get("punch_in_latitude")),
        punch_in_longitude=as_float(r.get("punch_in_longitude")),
        punch_in_address=r.get("punch_in_address"),
        punch_out_latitude=as_float(r.get("punch_out_latitude")),
        punch_out_longitude=as_float(r.get("punch_out_longitude")),
        punch_out_address=r.get("punch_out_address"),
        is_field_work=bool(r.get("is_field_work", False)),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (record_id,))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_latest_for_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date=%s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (employee_id, work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_open_for_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date=%s AND punch_in IS NOT NULL AND punch_out IS NULL
                ORDER BY punch_in DESC
                LIMIT 1
                """,
                (employee_id, work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create_punch_in(self, record: AttendanceRecord) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        id, employee_id, date, punch_in, status,
                        punch_in_latitude, punch_in_longitude, punch_in_address, is_field_work
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.id,
                        record.employee_id,
                        record.date,
                        record.punch_in,
                        record.status.value,
                        record.punch_in_latitude,
                        record.punch_in_longitude,
                        record.punch_in_address,
                        1 if record.is_field_work else 0,
                    ),
                )
                return True
        except mysql_errors.IntegrityError as exc:
            # uq_attendance_open_session: another open session exists for that day
            if is_duplicate_key(exc):
                return False
            raise

    def start_placeholder(
        self,
        record_id: str,
        *,
        punch_in: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        address: Optional[str] = None,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET punch_in=%s, status=%s,
                        punch_in_latitude=%s, punch_in_longitude=%s, punch_in_address=%s
                    WHERE id=%s AND punch_in IS NULL
                    """,
                    (punch_in, AttendanceStatus.PRESENT.value, latitude, longitude, address, record_id),
                )
                return cur.rowcount > 0
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise

    def close_session(
        self,
        record_id: str,
        *,
        punch_out: datetime,
        working_hours: Decimal,
        overtime_hours: Decimal,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        address: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_out=%s, working_hours=%s, overtime_hours=%s,
                    punch_out_latitude=COALESCE(%s, punch_out_latitude),
                    punch_out_longitude=COALESCE(%s, punch_out_longitude),
                    punch_out_address=COALESCE(%s, punch_out_address)
                WHERE id=%s AND punch_in IS NOT NULL AND punch_out IS NULL
                """,
                (punch_out, working_hours, overtime_hours, latitude, longitude, address, record_id),
            )
            return cur.rowcount > 0

    def amend_times(
        self,
        record_id: str,
        *,
        punch_in: Optional[datetime],
        punch_out: Optional[datetime],
        working_hours: Optional[Decimal],
        overtime_hours: Optional[Decimal],
        status: AttendanceStatus,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET punch_in=%s, punch_out=%s, working_hours=%s, overtime_hours=%s, status=%s
                    WHERE id=%s
                    """,
                    (punch_in, punch_out, working_hours, overtime_hours, status.value, record_id),
                )
                return cur.rowcount > 0
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise

    def update_location(
        self,
        record_id: str,
        *,
        slot: PunchType,
        latitude: float,
        longitude: float,
        address: Optional[str],
        is_field_work: bool,
    ) -> bool:
        prefix = "punch_in" if slot == PunchType.IN else "punch_out"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {prefix}_latitude=%s, {prefix}_longitude=%s, {prefix}_address=%s, is_field_work=%s
                WHERE id=%s
                """,
                (latitude, longitude, address, 1 if is_field_work else 0, record_id),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        employee_id: Optional[str] = None,
        work_date: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if work_date is not None:
            clauses.append("date=%s")
            params.append(work_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where_clause(clauses)}
                ORDER BY date DESC, created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_period(self, employee_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC, created_at ASC
                """,
                (employee_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_present(self, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(DISTINCT employee_id) AS total FROM attendance_records WHERE date=%s AND status=%s",
                (work_date, AttendanceStatus.PRESENT.value),
            )
            return int(fetchone(cur)["total"])
