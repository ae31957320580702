from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import MovementKind


@dataclass(frozen=True)
class MovementType:
    """A petty-cash category (tipo de movimiento), either income or expense."""

    type_id: int
    nombre: str
    kind: MovementKind
    is_active: bool = True


@dataclass(frozen=True)
class CashEntry:
    """Domain entity: one petty-cash ledger entry (registro de caja).

    amount is always positive; the sign comes from kind.
    """

    entry_id: int
    fecha: date
    type_id: int
    category: str
    kind: MovementKind
    amount: Decimal
    description: str
    invoice_number: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.kind == MovementKind.INCOME else -self.amount
