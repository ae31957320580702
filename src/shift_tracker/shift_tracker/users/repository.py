from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        nombre: str,
        apellido: str,
        role: Role,
        sede: Optional[str],
        area: Optional[str],
    ) -> int:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def list_active(self, *, exclude_area: Optional[str] = None) -> Sequence[User]:
        """Active users ordered by nombre."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError
