from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import MovementKind
from .model import CashEntry, MovementType


class MovementTypeRepository(Protocol):
    def list_all(self, *, only_active: bool = True) -> Sequence[MovementType]:
        raise NotImplementedError

    def get_by_id(self, type_id: int) -> Optional[MovementType]:
        raise NotImplementedError

    def get_by_name(self, nombre: str) -> Optional[MovementType]:
        raise NotImplementedError

    def create(self, *, nombre: str, kind: MovementKind) -> int:
        raise NotImplementedError


class CashEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[CashEntry]:
        raise NotImplementedError

    def list_entries(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[CashEntry]:
        """Entries with start <= fecha <= end (either bound optional), ordered by fecha, id."""

        raise NotImplementedError

    def balance_before(self, day: date) -> Decimal:
        """Signed sum (income - expense) of every entry dated before `day`."""

        raise NotImplementedError

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
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
