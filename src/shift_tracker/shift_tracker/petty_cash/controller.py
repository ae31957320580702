from __future__ import annotations

import csv
import io
from decimal import Decimal, InvalidOperation

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_body, ok
from ..core.exceptions import ValidationError
from .ledger import LedgerSummary
from .model import CashEntry, MovementType


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def _type_to_dict(t: MovementType) -> dict:
    return {"id": t.type_id, "nombre": t.nombre, "naturaleza": t.kind.value, "activo": t.is_active}


def _entry_to_dict(e: CashEntry) -> dict:
    return {
        "id": e.entry_id,
        "fecha": e.fecha.isoformat(),
        "tipo_movimiento_id": e.type_id,
        "categoria": e.category,
        "naturaleza": e.kind.value,
        "monto": _money(e.amount),
        "descripcion": e.description,
        "numero_factura": e.invoice_number,
        "created_by": e.created_by,
        "created_at": e.created_at.isoformat() if e.created_at else None,
    }


def _summary_to_dict(s: LedgerSummary) -> dict:
    return {
        "opening_balance": _money(s.opening_balance),
        "closing_balance": _money(s.closing_balance),
        "total_income": _money(s.total_income),
        "total_expense": _money(s.total_expense),
        "net": _money(s.net),
        "years": [
            {"year": y.year, "income": _money(y.income), "expense": _money(y.expense), "net": _money(y.net)}
            for y in s.years
        ],
        "months": [
            {
                "year": m.year,
                "month": m.month,
                "opening_balance": _money(m.opening_balance),
                "income": _money(m.income),
                "expense": _money(m.expense),
                "net": _money(m.net),
                "closing_balance": _money(m.closing_balance),
                "entries": [
                    dict(_entry_to_dict(line.entry), signed_amount=_money(line.signed_amount), balance=_money(line.balance))
                    for line in m.lines
                ],
            }
            for m in s.months
        ],
        "categories": {
            kind.value: [
                {"category": c.category, "total": _money(c.total), "percentage": float(c.percentage)} for c in shares
            ]
            for kind, shares in s.categories.items()
        },
    }


def _opening_balance_arg() -> Decimal:
    raw = (request.args.get("saldo_inicial") or "0").strip().replace(",", ".")
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValidationError("Saldo inicial no es válido")
    if not value.is_finite():
        raise ValidationError("Saldo inicial no es válido")
    return value


def register(app: Flask, container) -> None:
    def _write_ledger_csv(*, summary: LedgerSummary, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=[
                "fecha",
                "categoria",
                "naturaleza",
                "descripcion",
                "numero_factura",
                "monto",
                "saldo",
            ],
        )
        writer.writeheader()
        for line in summary.lines:
            e = line.entry
            writer.writerow(
                {
                    "fecha": e.fecha.isoformat(),
                    "categoria": e.category,
                    "naturaleza": e.kind.value,
                    "descripcion": e.description,
                    "numero_factura": e.invoice_number or "",
                    "monto": _money(line.signed_amount),
                    "saldo": _money(line.balance),
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/cash/types", methods=["GET"], endpoint="cash_types")
    @admin_required
    def cash_types():
        only_active = request.args.get("todos") not in ("1", "true")
        types = container.petty_cash_service.list_movement_types(only_active=only_active)
        return ok({"types": [_type_to_dict(t) for t in types]})

    @app.route("/api/admin/cash/types", methods=["POST"], endpoint="cash_types_create")
    @admin_required
    def cash_types_create():
        data = json_body()
        t = container.petty_cash_service.create_movement_type(
            g.current_user,
            nombre=data.get("nombre") or "",
            naturaleza=data.get("naturaleza"),
        )
        return ok({"type": _type_to_dict(t)}, status=201, message="Tipo de movimiento creado")

    @app.route("/api/admin/cash/entries", methods=["GET"], endpoint="cash_entries")
    @admin_required
    def cash_entries():
        entries = container.petty_cash_service.list_entries(
            year=request.args.get("ano") or None,
            month=request.args.get("mes") or None,
        )
        return ok({"entries": [_entry_to_dict(e) for e in entries]})

    @app.route("/api/admin/cash/entries", methods=["POST"], endpoint="cash_entries_create")
    @admin_required
    def cash_entries_create():
        data = json_body()
        fecha = parse_iso_date(data["fecha"]) if data.get("fecha") else None
        entry = container.petty_cash_service.record(
            g.current_user,
            fecha=fecha,
            tipo_movimiento_id=data.get("tipo_movimiento_id"),
            monto=data.get("monto"),
            descripcion=data.get("descripcion") or "",
            numero_factura=data.get("numero_factura"),
        )
        return ok({"entry": _entry_to_dict(entry)}, status=201, message="Registro guardado correctamente")

    @app.route("/api/admin/cash/entries/<int:entry_id>", methods=["DELETE"], endpoint="cash_entries_delete")
    @admin_required
    def cash_entries_delete(entry_id: int):
        container.petty_cash_service.delete(g.current_user, entry_id=entry_id)
        return ok(message="Registro eliminado correctamente")

    @app.route("/api/admin/cash/summary", methods=["GET"], endpoint="cash_summary")
    @admin_required
    def cash_summary():
        summary = container.petty_cash_service.summary(
            year=request.args.get("ano") or None,
            opening_balance=_opening_balance_arg(),
        )
        return ok({"summary": _summary_to_dict(summary)})

    @app.route("/api/admin/cash/export.csv", methods=["GET"], endpoint="cash_export")
    @admin_required
    def cash_export():
        year = request.args.get("ano") or None
        summary = container.petty_cash_service.summary(year=year, opening_balance=_opening_balance_arg())
        filename = f"caja_{year}.csv" if year else "caja.csv"
        return _write_ledger_csv(summary=summary, filename=filename)
