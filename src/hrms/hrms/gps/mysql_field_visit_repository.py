from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import FieldVisitStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_float, db_cursor, fetchall, fetchone
from .model import FieldWorkVisit
from .repository import FieldVisitRepository

_COLUMNS = """
    id, employee_id, client_name, purpose, start_time, end_time,
    start_latitude, start_longitude, start_address,
    end_latitude, end_longitude, end_address,
    distance, status, notes
"""


def _to_visit(r: dict) -> FieldWorkVisit:
    return FieldWorkVisit(
        id=r["id"],
        employee_id=r["employee_id"],
        client_name=r["client_name"],
        purpose=r["purpose"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        start_latitude=as_float(r.get("start_latitude")),
        start_longitude=as_float(r.get("start_longitude")),
        start_address=r.get("start_address"),
        end_latitude=as_float(r.get("end_latitude")),
        end_longitude=as_float(r.get("end_longitude")),
        end_address=r.get("end_address"),
        distance=as_decimal(r.get("distance")),
        status=FieldVisitStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLFieldVisitRepository(FieldVisitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, visit: FieldWorkVisit) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO field_work_visits(
                    id, employee_id, client_name, purpose, start_time,
                    start_latitude, start_longitude, start_address, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    visit.id,
                    visit.employee_id,
                    visit.client_name,
                    visit.purpose,
                    visit.start_time,
                    visit.start_latitude,
                    visit.start_longitude,
                    visit.start_address,
                    visit.status.value,
                ),
            )

    def get_by_id(self, visit_id: str) -> Optional[FieldWorkVisit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM field_work_visits WHERE id=%s", (visit_id,))
            row = fetchone(cur)
            return _to_visit(row) if row else None

    def get_latest_for_employee(self, employee_id: str) -> Optional[FieldWorkVisit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM field_work_visits
                WHERE employee_id=%s
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return _to_visit(row) if row else None

    def get_active_for_employee(self, employee_id: str) -> Optional[FieldWorkVisit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM field_work_visits
                WHERE employee_id=%s AND status=%s
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (employee_id, FieldVisitStatus.IN_PROGRESS.value),
            )
            row = fetchone(cur)
            return _to_visit(row) if row else None

    def update_end_location(
        self,
        visit_id: str,
        *,
        latitude: float,
        longitude: float,
        address: Optional[str],
        distance: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE field_work_visits
                SET end_latitude=%s, end_longitude=%s, end_address=%s, distance=%s
                WHERE id=%s AND status=%s
                """,
                (latitude, longitude, address, distance, visit_id, FieldVisitStatus.IN_PROGRESS.value),
            )
            return cur.rowcount > 0

    def complete(
        self,
        visit_id: str,
        *,
        end_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        address: Optional[str],
        distance: Decimal,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE field_work_visits
                SET end_time=%s, end_latitude=%s, end_longitude=%s, end_address=%s,
                    distance=%s, notes=%s, status=%s
                WHERE id=%s AND status=%s
                """,
                (
                    end_time,
                    latitude,
                    longitude,
                    address,
                    distance,
                    notes,
                    FieldVisitStatus.COMPLETED.value,
                    visit_id,
                    FieldVisitStatus.IN_PROGRESS.value,
                ),
            )
            return cur.rowcount > 0

    def list_started_between(self, employee_id: str, start: datetime, end: datetime) -> Sequence[FieldWorkVisit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM field_work_visits
                WHERE employee_id=%s AND start_time >= %s AND start_time < %s
                ORDER BY start_time DESC
                """,
                (employee_id, start, end),
            )
            return [_to_visit(r) for r in fetchall(cur)]
