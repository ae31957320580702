from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ..core.enums import MovementKind
from .model import CashEntry

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class LedgerLine:
    entry: CashEntry
    signed_amount: Decimal
    balance: Decimal


@dataclass
class MonthSummary:
    year: int
    month: int
    opening_balance: Decimal
    income: Decimal = ZERO
    expense: Decimal = ZERO
    closing_balance: Decimal = ZERO
    lines: list[LedgerLine] = field(default_factory=list)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass
class YearSummary:
    year: int
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class CategoryShare:
    category: str
    total: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class LedgerSummary:
    opening_balance: Decimal
    closing_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    months: list[MonthSummary]
    years: list[YearSummary]
    categories: dict[MovementKind, list[CategoryShare]]

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def lines(self) -> list[LedgerLine]:
        return [line for m in self.months for line in m.lines]


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _category_shares(totals: dict[str, Decimal]) -> list[CategoryShare]:
    grand = sum(totals.values(), ZERO)
    shares = []
    for name, total in totals.items():
        pct = _money(total * 100 / grand) if grand > 0 else ZERO
        shares.append(CategoryShare(category=name, total=_money(total), percentage=pct))
    shares.sort(key=lambda s: (-s.total, s.category))
    return shares


def summarize_ledger(entries: Iterable[CashEntry], opening_balance=ZERO) -> LedgerSummary:
    """Group entries by month with a running balance carried from `opening_balance`.

    Entries are processed in (fecha, id) order regardless of the input order.
    """

    opening = _money(opening_balance)
    balance = opening

    month_map: dict[tuple[int, int], MonthSummary] = {}
    year_map: dict[int, YearSummary] = {}
    category_map: dict[MovementKind, dict[str, Decimal]] = {k: {} for k in MovementKind}

    for e in sorted(entries, key=lambda x: (x.fecha, x.entry_id)):
        key = (e.fecha.year, e.fecha.month)
        m = month_map.get(key)
        if not m:
            m = MonthSummary(year=key[0], month=key[1], opening_balance=balance)
            month_map[key] = m

        y = year_map.get(e.fecha.year)
        if not y:
            y = YearSummary(year=e.fecha.year)
            year_map[e.fecha.year] = y

        amount = _money(e.amount)
        if e.kind == MovementKind.INCOME:
            m.income += amount
            y.income += amount
        else:
            m.expense += amount
            y.expense += amount

        signed = _money(e.signed_amount)
        balance += signed
        m.closing_balance = balance
        m.lines.append(LedgerLine(entry=e, signed_amount=signed, balance=balance))

        bucket = category_map[e.kind]
        bucket[e.category] = bucket.get(e.category, ZERO) + amount

    years = list(year_map.values())
    return LedgerSummary(
        opening_balance=opening,
        closing_balance=balance,
        total_income=sum((y.income for y in years), ZERO),
        total_expense=sum((y.expense for y in years), ZERO),
        months=list(month_map.values()),
        years=years,
        categories={k: _category_shares(v) for k, v in category_map.items()},
    )


def month_bounds(year: int, month: Optional[int] = None) -> tuple[date, date]:
    """First and last day of a month, or of the whole year when month is None."""

    if month is None:
        return date(year, 1, 1), date(year, 12, 31)
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, date.fromordinal(end.toordinal() - 1)
