from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee account.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    email: str
    password_hash: str
    nombre: str
    apellido: str
    role: Role
    sede: Optional[str] = None
    area: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()
