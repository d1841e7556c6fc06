from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalLevel, ApprovalType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Approval
from .repository import ApprovalRepository

_COLUMNS = "id, employee_id, approver_id, type, reference_id, status, level, comments, created_at, updated_at"


def insert_approval(cur, approval: Approval) -> None:
    """Insert `approval` on an open cursor so it commits with the request it belongs to."""

    cur.execute(
        """
        INSERT INTO approvals(id, employee_id, approver_id, type, reference_id, status, level, comments, created_at, updated_at)
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            approval.id,
            approval.employee_id,
            approval.approver_id,
            approval.type.value,
            approval.reference_id,
            approval.status.value,
            int(approval.level),
            approval.comments,
            approval.created_at,
            approval.updated_at or approval.created_at,
        ),
    )


def _to_approval(r: dict) -> Approval:
    return Approval(
        id=r["id"],
        employee_id=r["employee_id"],
        approver_id=r["approver_id"],
        type=ApprovalType(r["type"]),
        reference_id=r["reference_id"],
        level=ApprovalLevel(int(r["level"])),
        status=RequestStatus(r["status"]),
        comments=r.get("comments"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLApprovalRepository(ApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, approval: Approval) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            insert_approval(cur, approval)

    def get_by_id(self, approval_id: str) -> Optional[Approval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM approvals WHERE id=%s", (approval_id,))
            row = fetchone(cur)
            return _to_approval(row) if row else None

    def find_by_reference(self, approval_type: ApprovalType, reference_id: str) -> Optional[Approval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM approvals
                WHERE type=%s AND reference_id=%s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (approval_type.value, reference_id),
            )
            row = fetchone(cur)
            return _to_approval(row) if row else None

    def list(self, *, status: Optional[RequestStatus] = None, limit: int = 200) -> Sequence[Approval]:
        clauses: list[str] = []
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM approvals
                WHERE {where_clause(clauses)}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_approval(r) for r in fetchall(cur)]

    def decide(
        self,
        approval_id: str,
        *,
        status: RequestStatus,
        comments: Optional[str],
        decided_by: Optional[str],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE approvals
                SET status=%s, comments=%s, updated_at=%s
                WHERE id=%s AND status=%s
                """,
                (status.value, comments, decided_at, approval_id, RequestStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                return False

            cur.execute("SELECT type, reference_id FROM approvals WHERE id=%s", (approval_id,))
            row = fetchone(cur)
            # The referenced request follows the decision in the same transaction.
            approval_type = ApprovalType(row["type"])
            if approval_type == ApprovalType.LEAVE:
                cur.execute(
                    """
                    UPDATE leave_applications
                    SET status=%s, approved_by=%s, approved_at=%s, comments=%s
                    WHERE id=%s AND status=%s
                    """,
                    (status.value, decided_by, decided_at, comments, row["reference_id"], RequestStatus.PENDING.value),
                )
            elif approval_type == ApprovalType.MISS_PUNCH:
                cur.execute(
                    """
                    UPDATE miss_punch_requests
                    SET status=%s, approved_by=%s, approved_at=%s
                    WHERE id=%s AND status=%s
                    """,
                    (status.value, decided_by, decided_at, row["reference_id"], RequestStatus.PENDING.value),
                )
            return True
