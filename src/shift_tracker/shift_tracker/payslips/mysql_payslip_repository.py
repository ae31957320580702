from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Payslip
from .repository import PayslipRepository

_COLUMNS = "id, user_id, ano, mes, arquivo_url, storage_path, uploaded_by, created_at"


def _to_payslip(r: dict) -> Payslip:
    return Payslip(
        payslip_id=int(r["id"]),
        user_id=int(r["user_id"]),
        year=int(r["ano"]),
        month=int(r["mes"]),
        file_url=r["arquivo_url"],
        storage_path=r["storage_path"],
        uploaded_by=int(r["uploaded_by"]) if r.get("uploaded_by") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLPayslipRepository(PayslipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM boletas_usuarios WHERE id=%s", (int(payslip_id),))
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM boletas_usuarios WHERE user_id=%s ORDER BY created_at DESC, id DESC",
                (int(user_id),),
            )
            return [_to_payslip(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        user_id: int,
        year: int,
        month: int,
        file_url: str,
        storage_path: str,
        uploaded_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO boletas_usuarios(user_id, ano, mes, arquivo_url, storage_path, uploaded_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    arquivo_url=VALUES(arquivo_url),
                    storage_path=VALUES(storage_path),
                    uploaded_by=VALUES(uploaded_by),
                    created_at=CURRENT_TIMESTAMP
                """,
                (int(user_id), int(year), int(month), file_url, storage_path, int(uploaded_by)),
            )

            # If it was an update, lastrowid can be 0; fetch the id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM boletas_usuarios WHERE user_id=%s AND ano=%s AND mes=%s",
                (int(user_id), int(year), int(month)),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def delete(self, payslip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM boletas_usuarios WHERE id=%s", (int(payslip_id),))
            return cur.rowcount > 0
