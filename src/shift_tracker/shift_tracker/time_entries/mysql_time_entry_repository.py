from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Coordinates, TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = """
    id, user_id, workplace, start_time, end_time,
    start_latitude, start_longitude, end_latitude, end_longitude
"""


def _coords(lat, lng) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    return Coordinates(latitude=as_float(lat), longitude=as_float(lng))


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["id"]),
        user_id=int(r["user_id"]),
        workplace=r["workplace"],
        start_time=r["start_time"],
        end_time=r.get("end_time"),
        start_location=_coords(r.get("start_latitude"), r.get("start_longitude")),
        end_location=_coords(r.get("end_latitude"), r.get("end_longitude")),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get(self, cur, entry_id: int) -> Optional[TimeEntry]:
        cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE id=%s", (int(entry_id),))
        r = fetchone(cur)
        return _to_entry(r) if r else None

    def get_open_for_user(self, user_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE user_id=%s AND end_time IS NULL
                ORDER BY start_time DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE user_id=%s ORDER BY start_time DESC",
                (int(user_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create_entry(
        self,
        *,
        user_id: int,
        workplace: str,
        start_time: datetime,
        start_location: Coordinates,
    ) -> Optional[TimeEntry]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(user_id, workplace, start_time, start_latitude, start_longitude)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), workplace, start_time, start_location.latitude, start_location.longitude),
                )
                return self._get(cur, int(cur.lastrowid))
        except IntegrityError as e:
            # uq_time_entries_one_open: another request opened a shift first
            if is_duplicate_key(e):
                return None
            raise

    def close_entry(self, *, entry_id: int, end_time: datetime, end_location: Coordinates) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET end_time=%s, end_latitude=%s, end_longitude=%s
                WHERE id=%s AND end_time IS NULL
                """,
                (end_time, end_location.latitude, end_location.longitude, int(entry_id)),
            )
            if cur.rowcount <= 0:
                return None
            return self._get(cur, entry_id)
