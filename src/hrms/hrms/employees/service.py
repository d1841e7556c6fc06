from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import new_id, require_decimal, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: HR-managed employee records."""

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository):
        self._employees = employees
        self._departments = departments

    def _require_department(self, department_id: str) -> None:
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department does not exist", {"departmentId": "unknown department"})

    def _require_manager(self, manager_id: Optional[str], *, employee_id: Optional[str] = None) -> None:
        if not manager_id:
            return
        if manager_id == employee_id:
            raise ValidationError("An employee cannot manage themselves", {"managerId": "self reference"})
        manager = self._employees.get_by_id(manager_id)
        if not manager or not manager.is_active:
            raise ValidationError("Manager does not exist", {"managerId": "unknown employee"})

    def create_employee(
        self,
        *,
        employee_code: str,
        name: str,
        email: str,
        department_id: str,
        designation: str,
        salary: Any,
        join_date: date,
        phone: Optional[str] = None,
        pf_number: Optional[str] = None,
        manager_id: Optional[str] = None,
    ) -> Employee:
        employee_code = require_non_empty(employee_code, "employeeCode")
        name = require_non_empty(name, "name")
        email = require_non_empty(email, "email").lower()
        department_id = require_non_empty(department_id, "departmentId")
        designation = require_non_empty(designation, "designation")
        salary_value = require_decimal(salary, "salary", positive=True)

        if "@" not in email:
            raise ValidationError("Invalid email address", {"email": "invalid"})
        if self._employees.get_by_code(employee_code):
            raise ValidationError("Employee code already exists", {"employeeCode": "duplicate"})
        if self._employees.get_by_email(email):
            raise ValidationError("Email already exists", {"email": "duplicate"})
        self._require_department(department_id)
        self._require_manager(manager_id)

        employee = Employee(
            id=new_id(),
            employee_code=employee_code,
            name=name,
            email=email,
            department_id=department_id,
            designation=designation,
            salary=salary_value,
            join_date=join_date,
            phone=(phone or "").strip() or None,
            pf_number=(pf_number or "").strip() or None,
            manager_id=manager_id or None,
        )
        self._employees.create(employee)
        logger.info("Created employee %s (%s)", employee.id, employee.employee_code)
        return employee

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_active()

    def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        current = self.get_employee(employee_id)
        clean: dict[str, Any] = {}

        for field in ("name", "designation"):
            if field in changes:
                clean[field] = require_non_empty(changes[field], field)
        if "email" in changes:
            email = require_non_empty(changes["email"], "email").lower()
            other = self._employees.get_by_email(email)
            if other and other.id != current.id:
                raise ValidationError("Email already exists", {"email": "duplicate"})
            clean["email"] = email
        if "salary" in changes:
            clean["salary"] = require_decimal(changes["salary"], "salary", positive=True)
        if "department_id" in changes:
            self._require_department(changes["department_id"])
            clean["department_id"] = changes["department_id"]
        if "manager_id" in changes:
            self._require_manager(changes["manager_id"], employee_id=current.id)
            clean["manager_id"] = changes["manager_id"] or None
        for field in ("phone", "pf_number"):
            if field in changes:
                clean[field] = (changes[field] or "").strip() or None

        if not clean:
            raise ValidationError("Nothing to update")

        self._employees.update(current.id, clean)
        return self.get_employee(current.id)

    def deactivate(self, employee_id: str) -> None:
        employee = self.get_employee(employee_id)
        if not self._employees.set_active(employee.id, is_active=False):
            raise NotFoundError("Employee not found")
        logger.info("Deactivated employee %s", employee.id)


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def create_department(self, *, name: str, code: str) -> Department:
        name = require_non_empty(name, "name")
        code = require_non_empty(code, "code").upper()
        if self._departments.get_by_code(code):
            raise ValidationError("Department code already exists", {"code": "duplicate"})
        department = Department(id=new_id(), name=name, code=code)
        self._departments.create(department)
        return department

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()
