from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} no es válido")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} debe tener al menos {min_len} caracteres")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError("Email no es válido")
    return email


def require_month(value) -> int:
    try:
        month = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Mes no es válido")
    if not 1 <= month <= 12:
        raise ValidationError("Mes no es válido")
    return month


def require_year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Año no es válido")
    if not 2000 <= year <= 2100:
        raise ValidationError("Año no es válido")
    return year


def require_positive_amount(value, field_name: str = "Monto") -> Decimal:
    """Parse a money amount (2 decimal places, strictly positive)."""

    try:
        amount = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, AttributeError):
        raise ValidationError(f"{field_name} no es válido")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} debe ser mayor que 0")
    if amount != amount.quantize(Decimal("0.01")):
        raise ValidationError(f"{field_name} admite como máximo 2 decimales")
    return amount.quantize(Decimal("0.01"))
