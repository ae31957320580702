from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import DayOff
from .repository import DayOffRepository


def _to_day_off(r: dict) -> DayOff:
    return DayOff(
        day_off_id=int(r["id"]),
        user_id=int(r["user_id"]),
        fecha=r["fecha"],
        all_day=as_bool(r.get("todo_el_dia", True)),
    )


class MySQLDayOffRepository(DayOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, *, user_id: int, fecha: date) -> Optional[DayOff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, user_id, fecha, todo_el_dia FROM dias_libres WHERE user_id=%s AND fecha=%s",
                (int(user_id), fecha),
            )
            r = fetchone(cur)
            return _to_day_off(r) if r else None

    def create(self, *, user_id: int, fecha: date) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO dias_libres(user_id, fecha, todo_el_dia) VALUES(%s,%s,1)",
                    (int(user_id), fecha),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def delete(self, day_off_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM dias_libres WHERE id=%s", (int(day_off_id),))
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> Sequence[DayOff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, user_id, fecha, todo_el_dia FROM dias_libres WHERE user_id=%s ORDER BY fecha ASC",
                (int(user_id),),
            )
            return [_to_day_off(r) for r in fetchall(cur)]

    def list_for_users(self, user_ids: Iterable[int]) -> Sequence[dict]:
        placeholders, params = in_clause(int(u) for u in user_ids)
        if not params:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT dl.id, dl.user_id, dl.fecha, dl.todo_el_dia,
                       u.nombre, u.apellido, u.sede, u.area
                FROM dias_libres dl
                JOIN users u ON u.id = dl.user_id
                WHERE dl.user_id IN ({placeholders})
                ORDER BY dl.fecha ASC, dl.id ASC
                """,
                params,
            )
            return [
                {
                    "id": int(r["id"]),
                    "user_id": int(r["user_id"]),
                    "fecha": r["fecha"],
                    "todo_el_dia": as_bool(r["todo_el_dia"]),
                    "user": {
                        "id": int(r["user_id"]),
                        "nombre": r["nombre"],
                        "apellido": r.get("apellido") or "",
                        "sede": r.get("sede"),
                        "area": r.get("area"),
                    },
                }
                for r in fetchall(cur)
            ]
