from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account.

    Note: pure data object, no database access here.
    """

    id: str
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[str] = None
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AuthToken:
    token: str
    user_id: str
    expires_at: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionUser:
    """Who is calling, resolved from a bearer token."""

    user_id: str
    username: str
    role: Role
    employee_id: Optional[str]


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime
    user: SessionUser
