from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Department, Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, limit: int = 200) -> Sequence[Employee]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(self, employee: Employee) -> None:
        raise NotImplementedError

    def update(self, employee_id: str, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: str, *, is_active: bool) -> bool:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: str) -> Optional[Department]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def create(self, department: Department) -> None:
        raise NotImplementedError
