from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, email, password_hash, nombre, apellido, role, sede, area, activo"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        nombre=row["nombre"],
        apellido=row.get("apellido") or "",
        role=Role(row["role"]),
        sede=row.get("sede"),
        area=row.get("area"),
        is_active=as_bool(row.get("activo", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE LOWER(email)=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        nombre: str,
        apellido: str,
        role: Role,
        sede: Optional[str],
        area: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, password_hash, nombre, apellido, role, sede, area, activo)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (email, password_hash, nombre, apellido, role.value, sede, area),
            )
            return int(cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET activo=%s WHERE id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def list_active(self, *, exclude_area: Optional[str] = None) -> Sequence[User]:
        clauses = ["activo=1"]
        params: list[object] = []
        if exclude_area is not None:
            clauses.append("(area IS NULL OR area<>%s)")
            params.append(exclude_area)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {' AND '.join(clauses)} ORDER BY nombre ASC",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY nombre ASC")
            return [_to_user(r) for r in fetchall(cur)]
