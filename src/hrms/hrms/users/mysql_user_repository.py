from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AuthToken, User
from .repository import TokenRepository, UserRepository

_COLUMNS = "id, username, password_hash, role, employee_id, is_active, last_login, created_at"


def _to_user(row: dict) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_id=row.get("employee_id"),
        is_active=bool(row.get("is_active", True)),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create(self, user: User) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(id, username, password_hash, role, employee_id, is_active)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user.id, user.username, user.password_hash, user.role.value, user.employee_id, 1 if user.is_active else 0),
            )

    def touch_last_login(self, user_id: str, when: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE id=%s", (when, user_id))
            return cur.rowcount > 0


class MySQLTokenRepository(TokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, token: AuthToken) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO auth_tokens(token, user_id, expires_at) VALUES(%s,%s,%s)",
                (token.token, token.user_id, token.expires_at),
            )

    def get(self, token: str) -> Optional[AuthToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT token, user_id, expires_at, created_at FROM auth_tokens WHERE token=%s", (token,))
            row = fetchone(cur)
            if not row:
                return None
            return AuthToken(
                token=row["token"],
                user_id=row["user_id"],
                expires_at=row["expires_at"],
                created_at=row.get("created_at"),
            )

    def delete(self, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_tokens WHERE token=%s", (token,))
            return cur.rowcount > 0

    def delete_expired(self, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_tokens WHERE expires_at <= %s", (now,))
            return int(cur.rowcount)
