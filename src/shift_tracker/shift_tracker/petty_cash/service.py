from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.validators import require_month, require_non_empty, require_positive_amount, require_year
from ..core.enums import MovementKind
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.service import SessionUser, require_admin
from .ledger import LedgerSummary, month_bounds, summarize_ledger
from .model import CashEntry, MovementType
from .repository import CashEntryRepository, MovementTypeRepository

logger = logging.getLogger(__name__)


def parse_kind(value) -> MovementKind:
    try:
        return MovementKind(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Naturaleza no es válida (INGRESO o EGRESO)")


class PettyCashService:
    """Use cases: movement types, cash entries and the ledger summary."""

    def __init__(self, types: MovementTypeRepository, entries: CashEntryRepository):
        self._types = types
        self._entries = entries

    def list_movement_types(self, *, only_active: bool = True) -> list[MovementType]:
        return list(self._types.list_all(only_active=only_active))

    def create_movement_type(self, current: SessionUser, *, nombre: str, naturaleza) -> MovementType:
        require_admin(current)

        name = require_non_empty(nombre or "", "Nombre")
        kind = parse_kind(naturaleza)
        if self._types.get_by_name(name):
            raise ConflictError("Ya existe un tipo de movimiento con ese nombre")

        type_id = self._types.create(nombre=name, kind=kind)
        logger.info("Movement type %s (%s, %s) created by %s", type_id, name, kind.value, current.user_id)
        return MovementType(type_id=type_id, nombre=name, kind=kind, is_active=True)

    def record(
        self,
        current: SessionUser,
        *,
        fecha: Optional[date],
        tipo_movimiento_id,
        monto,
        descripcion: str,
        numero_factura: Optional[str] = None,
    ) -> CashEntry:
        require_admin(current)

        if fecha is None:
            raise ValidationError("Fecha no es válida (AAAA-MM-DD)")
        amount = require_positive_amount(monto)
        description = require_non_empty(descripcion or "", "Descripción")

        try:
            type_id = int(tipo_movimiento_id)
        except (TypeError, ValueError):
            raise ValidationError("Selecciona un tipo de movimiento")

        movement_type = self._types.get_by_id(type_id)
        if not movement_type or not movement_type.is_active:
            raise NotFoundError("Tipo de movimiento no encontrado")

        invoice = (numero_factura or "").strip() or None
        entry_id = self._entries.create(
            fecha=fecha,
            type_id=type_id,
            amount=amount,
            description=description,
            invoice_number=invoice,
            created_by=current.user_id,
        )
        logger.info(
            "Cash entry %s: %s %s (%s) recorded by %s",
            entry_id,
            movement_type.kind.value,
            amount,
            movement_type.nombre,
            current.user_id,
        )

        saved = self._entries.get_by_id(entry_id)
        if not saved:
            raise NotFoundError("Registro no encontrado")
        return saved

    def delete(self, current: SessionUser, *, entry_id: int) -> None:
        require_admin(current)

        if not self._entries.delete(int(entry_id)):
            raise NotFoundError("Registro no encontrado")
        logger.info("Cash entry %s deleted by %s", entry_id, current.user_id)

    def list_entries(self, *, year=None, month=None) -> list[CashEntry]:
        if year is None:
            if month is not None:
                raise ValidationError("Indica el año")
            return list(self._entries.list_entries())

        start, end = month_bounds(require_year(year), require_month(month) if month is not None else None)
        return list(self._entries.list_entries(start=start, end=end))

    def summary(self, *, year=None, opening_balance=Decimal("0")) -> LedgerSummary:
        """Ledger for one year (or all time); earlier entries roll into the opening balance."""

        opening = Decimal(opening_balance)
        if year is None:
            return summarize_ledger(self._entries.list_entries(), opening)

        y = require_year(year)
        opening += self._entries.balance_before(date(y, 1, 1))
        return summarize_ledger(self.list_entries(year=y), opening)
