from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import new_id, require_min_length, require_non_empty
from ..core.constants import DEFAULT_TOKEN_TTL_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AuthToken, IssuedToken, SessionUser, User
from .repository import TokenRepository, UserRepository

logger = logging.getLogger(__name__)


def _session_user(user: User) -> SessionUser:
    return SessionUser(user_id=user.id, username=user.username, role=user.role, employee_id=user.employee_id)


class AuthService:
    """Use case: log in with username/password and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenRepository, *, ttl_days: int = DEFAULT_TOKEN_TTL_DAYS):
        self._users = users
        self._tokens = tokens
        self._ttl = timedelta(days=ttl_days)

    def login(self, username: str, password: str, *, now: Optional[datetime] = None) -> IssuedToken:
        now = now or now_local()
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes never match.
            ok = False
        if not ok:
            raise AuthenticationError("Invalid username or password")

        self._tokens.delete_expired(now)
        token = AuthToken(token=secrets.token_hex(32), user_id=user.id, expires_at=now + self._ttl)
        self._tokens.create(token)
        self._users.touch_last_login(user.id, now)
        logger.info("User %s logged in", user.username)
        return IssuedToken(token=token.token, expires_at=token.expires_at, user=_session_user(user))

    def resolve(self, token: str, *, now: Optional[datetime] = None) -> SessionUser:
        now = now or now_local()
        stored = self._tokens.get(token)
        if not stored:
            raise AuthenticationError("Invalid or expired token")
        if stored.expires_at <= now:
            self._tokens.delete(token)
            raise AuthenticationError("Invalid or expired token")

        user = self._users.get_by_id(stored.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid or expired token")
        return _session_user(user)

    def logout(self, token: str) -> None:
        self._tokens.delete(token)


class UserService:
    """Use case: manage login accounts (admin)."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    def create_account(
        self,
        *,
        username: str,
        password: str,
        role: Role,
        employee_id: Optional[str] = None,
    ) -> User:
        username = require_non_empty(username, "username")
        require_min_length(password, "password", 6)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists", {"username": "duplicate"})

        if employee_id:
            employee = self._employees.get_by_id(employee_id)
            if not employee or not employee.is_active:
                raise NotFoundError("Employee not found")
        elif role == Role.EMPLOYEE:
            raise ValidationError("employeeId is required for employee accounts", {"employeeId": "required"})

        user = User(
            id=new_id(),
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            employee_id=employee_id,
        )
        self._users.create(user)
        logger.info("Created %s account %s", role.value, username)
        return user
