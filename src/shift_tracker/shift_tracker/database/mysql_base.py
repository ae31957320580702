from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

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


def as_bool(value: Any) -> bool:
    """MySQL BOOLEAN columns come back as 0/1 (or b'\\x01' for BIT)."""

    if isinstance(value, (bytes, bytearray)):
        return any(value)
    return bool(value)


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def in_clause(values) -> tuple[str, tuple]:
    """Build the placeholder list for `col IN (...)`. Callers skip the query on empty input."""

    values = tuple(values)
    return ", ".join(["%s"] * len(values)), values


def is_duplicate_key(exc: Exception) -> bool:
    """True when `exc` is a UNIQUE/PRIMARY KEY violation."""

    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY
