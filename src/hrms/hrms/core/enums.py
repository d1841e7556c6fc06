from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    ON_LEAVE = "on_leave"


class RequestStatus(str, Enum):
    """Approval workflow state (leave / miss punch / overtime)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalType(str, Enum):
    LEAVE = "leave"
    MISS_PUNCH = "miss_punch"
    OVERTIME = "overtime"


class ApprovalLevel(IntEnum):
    MANAGER = 1
    HR = 2
    DEPARTMENT_HEAD = 3


class PunchType(str, Enum):
    IN = "in"
    OUT = "out"


class FieldVisitStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
