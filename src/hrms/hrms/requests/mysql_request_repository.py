from __future__ import annotations

from typing import Optional, Sequence

from ..approvals.model import Approval
from ..approvals.mysql_approval_repository import insert_approval
from ..core.enums import PunchType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import MissPunchRequest
from .repository import MissPunchRepository

_COLUMNS = "id, employee_id, date, punch_type, requested_time, reason, status, approved_by, approved_at, created_at"


def _to_request(r: dict) -> MissPunchRequest:
    return MissPunchRequest(
        id=r["id"],
        employee_id=r["employee_id"],
        date=r["date"],
        punch_type=PunchType(r["punch_type"]),
        requested_time=r["requested_time"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
    )


class MySQLMissPunchRepository(MissPunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_with_approval(self, request: MissPunchRequest, approval: Approval) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO miss_punch_requests(id, employee_id, date, punch_type, requested_time, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.id,
                    request.employee_id,
                    request.date,
                    request.punch_type.value,
                    request.requested_time,
                    request.reason,
                    request.status.value,
                    request.created_at,
                ),
            )
            insert_approval(cur, approval)

    def get_by_id(self, request_id: str) -> Optional[MissPunchRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM miss_punch_requests WHERE id=%s", (request_id,))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[MissPunchRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM miss_punch_requests
                WHERE {where_clause(clauses)}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]
