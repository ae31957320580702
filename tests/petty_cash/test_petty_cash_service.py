from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from shift_tracker.core.enums import MovementKind, Role
from shift_tracker.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from shift_tracker.petty_cash.model import CashEntry, MovementType
from shift_tracker.petty_cash.service import PettyCashService, parse_kind
from shift_tracker.users.service import SessionUser


class InMemoryTypes:
    def __init__(self, *types: MovementType):
        self.types = {t.type_id: t for t in types}

    def list_all(self, *, only_active: bool = True):
        return [t for t in self.types.values() if t.is_active or not only_active]

    def get_by_id(self, type_id) -> Optional[MovementType]:
        return self.types.get(type_id)

    def get_by_name(self, nombre) -> Optional[MovementType]:
        for t in self.types.values():
            if t.nombre.lower() == nombre.strip().lower():
                return t
        return None

    def create(self, *, nombre, kind) -> int:
        type_id = max(self.types, default=0) + 1
        self.types[type_id] = MovementType(type_id, nombre, kind)
        return type_id


class InMemoryEntries:
    def __init__(self, types: InMemoryTypes):
        self._types = types
        self.rows: dict[int, CashEntry] = {}
        self._id = 0

    def get_by_id(self, entry_id) -> Optional[CashEntry]:
        return self.rows.get(entry_id)

    def list_entries(self, *, start=None, end=None):
        items = [
            e
            for e in self.rows.values()
            if (start is None or e.fecha >= start) and (end is None or e.fecha <= end)
        ]
        return sorted(items, key=lambda e: (e.fecha, e.entry_id))

    def balance_before(self, day):
        return sum((e.signed_amount for e in self.rows.values() if e.fecha < day), Decimal("0"))

    def create(self, *, fecha, type_id, amount, description, invoice_number, created_by) -> int:
        self._id += 1
        t = self._types.get_by_id(type_id)
        self.rows[self._id] = CashEntry(
            self._id, fecha, type_id, t.nombre, t.kind, amount, description, invoice_number, created_by
        )
        return self._id

    def delete(self, entry_id) -> bool:
        return self.rows.pop(entry_id, None) is not None


ADMIN = SessionUser(1, "jefe@example.com", "Jefe", "", Role.ADMIN, True)
ANA = SessionUser(2, "ana@example.com", "Ana", "Pérez", Role.USER, False)


@pytest.fixture()
def svc():
    types = InMemoryTypes(
        MovementType(1, "Aporte", MovementKind.INCOME),
        MovementType(2, "Movilidad", MovementKind.EXPENSE),
        MovementType(3, "Obsoleto", MovementKind.EXPENSE, is_active=False),
    )
    return PettyCashService(types, InMemoryEntries(types))


def test_parse_kind():
    assert parse_kind(" egreso ") == MovementKind.EXPENSE
    assert parse_kind("INGRESO") == MovementKind.INCOME
    with pytest.raises(ValidationError):
        parse_kind("otro")


def test_movement_types(svc):
    assert [t.nombre for t in svc.list_movement_types()] == ["Aporte", "Movilidad"]
    assert len(svc.list_movement_types(only_active=False)) == 3

    created = svc.create_movement_type(ADMIN, nombre=" Peajes ", naturaleza="egreso")
    assert (created.nombre, created.kind) == ("Peajes", MovementKind.EXPENSE)

    with pytest.raises(ConflictError):
        svc.create_movement_type(ADMIN, nombre="peajes", naturaleza="EGRESO")
    with pytest.raises(AuthorizationError):
        svc.create_movement_type(ANA, nombre="Otro", naturaleza="EGRESO")
    with pytest.raises(ValidationError):
        svc.create_movement_type(ADMIN, nombre=" ", naturaleza="EGRESO")


def test_record_entry(svc):
    e = svc.record(
        ADMIN,
        fecha=date(2025, 3, 1),
        tipo_movimiento_id="2",
        monto="12,5",
        descripcion=" Taxi al banco ",
        numero_factura="  ",
    )

    assert e.amount == Decimal("12.50")
    assert e.kind == MovementKind.EXPENSE
    assert e.category == "Movilidad"
    assert e.description == "Taxi al banco"
    assert e.invoice_number is None
    assert e.created_by == ADMIN.user_id


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"monto": "0"}, ValidationError),
        ({"monto": "1.005"}, ValidationError),
        ({"descripcion": ""}, ValidationError),
        ({"fecha": None}, ValidationError),
        ({"tipo_movimiento_id": "x"}, ValidationError),
        ({"tipo_movimiento_id": 3}, NotFoundError),
        ({"tipo_movimiento_id": 99}, NotFoundError),
    ],
)
def test_record_validation(svc, kwargs, error):
    args = {
        "fecha": date(2025, 3, 1),
        "tipo_movimiento_id": 1,
        "monto": "10",
        "descripcion": "Aporte semanal",
    }
    args.update(kwargs)
    with pytest.raises(error):
        svc.record(ADMIN, **args)


def test_record_and_delete_require_admin(svc):
    with pytest.raises(AuthorizationError):
        svc.record(ANA, fecha=date(2025, 3, 1), tipo_movimiento_id=1, monto="10", descripcion="x")

    e = svc.record(ADMIN, fecha=date(2025, 3, 1), tipo_movimiento_id=1, monto="10", descripcion="x")
    with pytest.raises(AuthorizationError):
        svc.delete(ANA, entry_id=e.entry_id)

    svc.delete(ADMIN, entry_id=e.entry_id)
    assert svc.list_entries() == []
    with pytest.raises(NotFoundError):
        svc.delete(ADMIN, entry_id=e.entry_id)


def test_list_entries_by_year_and_month(svc):
    for fecha in (date(2025, 2, 28), date(2025, 3, 1), date(2025, 3, 31), date(2026, 3, 1)):
        svc.record(ADMIN, fecha=fecha, tipo_movimiento_id=1, monto="1", descripcion="x")

    assert len(svc.list_entries()) == 4
    assert len(svc.list_entries(year=2025)) == 3
    assert [e.fecha for e in svc.list_entries(year="2025", month="3")] == [date(2025, 3, 1), date(2025, 3, 31)]
    with pytest.raises(ValidationError):
        svc.list_entries(month=3)


def test_summary_for_year_opens_with_earlier_balance(svc):
    svc.record(ADMIN, fecha=date(2024, 12, 31), tipo_movimiento_id=1, monto="40", descripcion="x")
    svc.record(ADMIN, fecha=date(2024, 12, 31), tipo_movimiento_id=2, monto="15", descripcion="x")
    svc.record(ADMIN, fecha=date(2025, 1, 2), tipo_movimiento_id=2, monto="5", descripcion="x")

    summary = svc.summary(year=2025, opening_balance=Decimal("100"))

    assert summary.opening_balance == Decimal("125.00")
    assert summary.closing_balance == Decimal("120.00")
    assert [line.entry.fecha.year for line in summary.lines] == [2025]

    everything = svc.summary(opening_balance=Decimal("100"))
    assert everything.opening_balance == Decimal("100.00")
    assert everything.closing_balance == Decimal("120.00")
