from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

_EMPLOYEE_COLUMNS = """
    id, employee_code, name, email, phone, department_id, designation, salary,
    join_date, pf_number, manager_id, is_active, created_at, updated_at
"""

# Columns HR may change after creation.
_UPDATABLE = ("name", "email", "phone", "department_id", "designation", "salary", "pf_number", "manager_id")


def _to_employee(r: dict) -> Employee:
    return Employee(
        id=r["id"],
        employee_code=r["employee_code"],
        name=r["name"],
        email=r["email"],
        phone=r.get("phone"),
        department_id=r["department_id"],
        designation=r["designation"],
        salary=as_decimal(r["salary"]),
        join_date=r["join_date"],
        pf_number=r.get("pf_number"),
        manager_id=r.get("manager_id"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._get_one("id", employee_id)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._get_one("employee_code", employee_code)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email)

    def list_active(self, *, limit: int = 200) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE is_active=1 ORDER BY name LIMIT %s",
                (int(limit),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees WHERE is_active=1")
            return int(fetchone(cur)["total"])

    def create(self, employee: Employee) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    id, employee_code, name, email, phone, department_id, designation,
                    salary, join_date, pf_number, manager_id, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee.id,
                    employee.employee_code,
                    employee.name,
                    employee.email,
                    employee.phone,
                    employee.department_id,
                    employee.designation,
                    employee.salary,
                    employee.join_date,
                    employee.pf_number,
                    employee.manager_id,
                    1 if employee.is_active else 0,
                ),
            )

    def update(self, employee_id: str, changes: Mapping[str, Any]) -> bool:
        fields = [k for k in _UPDATABLE if k in changes]
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        params = [changes[k] for k in fields] + [employee_id]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE id=%s", tuple(params))
            return cur.rowcount > 0

    def set_active(self, employee_id: str, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=%s WHERE id=%s", (1 if is_active else 0, employee_id))
            return cur.rowcount > 0


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_department(r: dict) -> Department:
        return Department(id=r["id"], name=r["name"], code=r["code"], created_at=r.get("created_at"))

    def get_by_id(self, department_id: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, code, created_at FROM departments WHERE id=%s", (department_id,))
            row = fetchone(cur)
            return self._to_department(row) if row else None

    def get_by_code(self, code: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, code, created_at FROM departments WHERE code=%s", (code,))
            row = fetchone(cur)
            return self._to_department(row) if row else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, code, created_at FROM departments ORDER BY name")
            return [self._to_department(r) for r in fetchall(cur)]

    def create(self, department: Department) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO departments(id, name, code) VALUES(%s,%s,%s)",
                (department.id, department.name, department.code),
            )
