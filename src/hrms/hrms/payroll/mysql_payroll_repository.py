from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, where_clause
from .model import PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    id, employee_id, month, year, basic_salary, working_days, present_days,
    overtime_hours, overtime_amount, pf_deduction, lwp_deduction, net_salary, created_at
"""


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        id=r["id"],
        employee_id=r["employee_id"],
        month=int(r["month"]),
        year=int(r["year"]),
        basic_salary=as_decimal(r["basic_salary"]),
        working_days=int(r["working_days"]),
        present_days=int(r["present_days"]),
        overtime_hours=as_decimal(r["overtime_hours"]),
        overtime_amount=as_decimal(r["overtime_amount"]),
        pf_deduction=as_decimal(r["pf_deduction"]),
        lwp_deduction=as_decimal(r["lwp_deduction"]),
        net_salary=as_decimal(r["net_salary"]),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replace(self, record: PayrollRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_records WHERE employee_id=%s AND month=%s AND year=%s",
                (record.employee_id, record.month, record.year),
            )
            cur.execute(
                """
                INSERT INTO payroll_records(
                    id, employee_id, month, year, basic_salary, working_days, present_days,
                    overtime_hours, overtime_amount, pf_deduction, lwp_deduction, net_salary
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.id,
                    record.employee_id,
                    record.month,
                    record.year,
                    record.basic_salary,
                    record.working_days,
                    record.present_days,
                    record.overtime_hours,
                    record.overtime_amount,
                    record.pf_deduction,
                    record.lwp_deduction,
                    record.net_salary,
                ),
            )

    def get_for_period(self, employee_id: str, month: int, year: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE employee_id=%s AND month=%s AND year=%s",
                (employee_id, int(month), int(year)),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list(self, *, employee_id: Optional[str] = None, limit: int = 200) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll_records
                WHERE {where_clause(clauses)}
                ORDER BY year DESC, month DESC, created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_record(r) for r in fetchall(cur)]
