import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from src.hrms.hrms.leaves.model import LeaveAssignment
from src.hrms.hrms.leaves.mysql_leave_repository import MySQLLeaveAssignmentRepository


class ScriptedCursor:
    """Raises the scripted error for inserts of the given employee ids."""

    def __init__(self, failures):
        self.failures = failures
        self.inserted = []

    def execute(self, sql, params=()):
        employee_id = params[1]
        if employee_id in self.failures:
            raise self.failures[employee_id]
        self.inserted.append(employee_id)

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class ScriptedFactory:
    def __init__(self, connection):
        self._connection = connection

    def connect(self):
        return self._connection


def _assignment(employee_id):
    return LeaveAssignment(
        id=f"la-{employee_id}",
        employee_id=employee_id,
        leave_type_id="lt-annual",
        year=2026,
        allocated_days=12,
        remaining_days=12,
    )


def _duplicate():
    return mysql_errors.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)


def test_create_many_skips_rows_inserted_concurrently():
    cursor = ScriptedCursor({"emp-b": _duplicate()})
    connection = ScriptedConnection(cursor)
    repo = MySQLLeaveAssignmentRepository(ScriptedFactory(connection))

    created = repo.create_many([_assignment("emp-a"), _assignment("emp-b"), _assignment("emp-c")])

    assert [a.employee_id for a in created] == ["emp-a", "emp-c"]
    assert cursor.inserted == ["emp-a", "emp-c"]
    assert connection.committed and not connection.rolled_back


def test_create_many_propagates_other_integrity_errors():
    broken = mysql_errors.IntegrityError(msg="Foreign key", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    connection = ScriptedConnection(ScriptedCursor({"emp-a": broken}))
    repo = MySQLLeaveAssignmentRepository(ScriptedFactory(connection))

    with pytest.raises(mysql_errors.IntegrityError):
        repo.create_many([_assignment("emp-a")])

    assert connection.rolled_back
