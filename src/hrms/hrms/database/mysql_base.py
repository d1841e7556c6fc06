from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: Exception) -> bool:
    """True when a unique key rejected the write (ER_DUP_ENTRY)."""

    return isinstance(exc, mysql_errors.IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def as_decimal(value: Any) -> Optional[Decimal]:
    """mysql-connector returns DECIMAL as Decimal, but aggregates may come back as float/str."""

    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def where_clause(clauses: list[str]) -> str:
    return " AND ".join(clauses) if clauses else "1=1"
