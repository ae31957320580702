from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import MovementKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_decimal, db_cursor, fetchall, fetchone
from .model import CashEntry, MovementType
from .repository import CashEntryRepository, MovementTypeRepository


def _to_type(r: dict) -> MovementType:
    return MovementType(
        type_id=int(r["id"]),
        nombre=r["nombre"],
        kind=MovementKind(r["naturaleza"]),
        is_active=as_bool(r.get("activo", True)),
    )


def _to_entry(r: dict) -> CashEntry:
    return CashEntry(
        entry_id=int(r["id"]),
        fecha=r["fecha"],
        type_id=int(r["tipo_movimiento_id"]),
        category=r["categoria"],
        kind=MovementKind(r["naturaleza"]),
        amount=as_decimal(r["monto"]),
        description=r["descripcion"],
        invoice_number=r.get("numero_factura"),
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
        created_at=r.get("created_at"),
    )


_ENTRY_SELECT = """
    SELECT rc.id, rc.fecha, rc.tipo_movimiento_id, rc.monto, rc.descripcion,
           rc.numero_factura, rc.created_by, rc.created_at,
           tm.nombre AS categoria, tm.naturaleza
    FROM registros_caja rc
    JOIN tipos_movimiento tm ON tm.id = rc.tipo_movimiento_id
"""


class MySQLMovementTypeRepository(MovementTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, only_active: bool = True) -> Sequence[MovementType]:
        where = "WHERE activo=1" if only_active else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT id, nombre, naturaleza, activo FROM tipos_movimiento {where} ORDER BY naturaleza, nombre")
            return [_to_type(r) for r in fetchall(cur)]

    def get_by_id(self, type_id: int) -> Optional[MovementType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, nombre, naturaleza, activo FROM tipos_movimiento WHERE id=%s", (int(type_id),))
            r = fetchone(cur)
            return _to_type(r) if r else None

    def get_by_name(self, nombre: str) -> Optional[MovementType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, nombre, naturaleza, activo FROM tipos_movimiento WHERE LOWER(nombre)=%s",
                (nombre.strip().lower(),),
            )
            r = fetchone(cur)
            return _to_type(r) if r else None

    def create(self, *, nombre: str, kind: MovementKind) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO tipos_movimiento(nombre, naturaleza, activo) VALUES(%s,%s,1)",
                (nombre, kind.value),
            )
            return int(cur.lastrowid)


class MySQLCashEntryRepository(CashEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[CashEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ENTRY_SELECT} WHERE rc.id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_entries(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CashEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("rc.fecha >= %s")
            params.append(start)
        if end is not None:
            clauses.append("rc.fecha <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_ENTRY_SELECT} {where} ORDER BY rc.fecha ASC, rc.id ASC", tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]

    def balance_before(self, day: date) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(CASE WHEN tm.naturaleza=%s THEN rc.monto ELSE -rc.monto END), 0) AS balance
                FROM registros_caja rc
                JOIN tipos_movimiento tm ON tm.id = rc.tipo_movimiento_id
                WHERE rc.fecha < %s
                """,
                (MovementKind.INCOME.value, day),
            )
            r = fetchone(cur)
            return as_decimal(r["balance"] if r else 0)

    def create(
        self,
        *,
        fecha: date,
        type_id: int,
        amount: Decimal,
        description: str,
        invoice_number: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO registros_caja(fecha, tipo_movimiento_id, monto, descripcion, numero_factura, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (fecha, int(type_id), amount, description, invoice_number, int(created_by)),
            )
            return int(cur.lastrowid)

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM registros_caja WHERE id=%s", (int(entry_id),))
            return cur.rowcount > 0
