from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    USER = "user"


class ShiftStatus(str, Enum):
    """Calendar status of a time entry."""

    COMPLETED = "completado"
    IN_PROGRESS = "en progreso"


class MovementKind(str, Enum):
    """Nature of a petty-cash movement type."""

    INCOME = "INGRESO"
    EXPENSE = "EGRESO"
