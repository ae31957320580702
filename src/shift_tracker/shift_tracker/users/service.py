from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciales inválidas"
INACTIVE_ACCOUNT = "Tu cuenta no está activa. Contacta al administrador."


@dataclass(frozen=True)
class SessionUser:
    """What we keep about the logged-in user for the duration of a request."""

    user_id: int
    email: str
    nombre: str
    apellido: str
    role: Role
    is_admin: bool

    @property
    def full_name(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "nombre": self.nombre,
            "apellido": self.apellido,
            "role": self.role.value,
            "is_admin": self.is_admin,
        }


def require_admin(current: SessionUser, message: str = "No tienes permisos para esta acción") -> None:
    if not current.is_admin:
        raise AuthorizationError(message)


class AuthService:
    """Use cases: login, session re-validation and password change."""

    def __init__(self, users: UserRepository, *, admin_emails: Iterable[str] = ()):
        self._users = users
        self._admin_emails = frozenset(e.strip().lower() for e in admin_emails)

    def is_admin(self, user: User) -> bool:
        return user.role == Role.ADMIN or user.email.strip().lower() in self._admin_emails

    def _to_session_user(self, user: User) -> SessionUser:
        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            nombre=user.nombre,
            apellido=user.apellido,
            role=user.role,
            is_admin=self.is_admin(user),
        )

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email) if email else None
        if not user:
            logger.info("Login failed for unknown email %r", email)
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Login failed for user_id=%s (bad password)", user.user_id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.is_active:
            logger.warning("Login rejected for inactive user_id=%s", user.user_id)
            raise AuthenticationError(INACTIVE_ACCOUNT)

        logger.info("User %s logged in", user.user_id)
        return self._to_session_user(user)

    def load_session_user(self, user_id: int) -> SessionUser:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("No hay sesión activa")
        if not user.is_active:
            logger.warning("Session dropped for deactivated user_id=%s", user.user_id)
            raise AuthenticationError(INACTIVE_ACCOUNT)
        return self._to_session_user(user)

    def change_password(self, user_id: int, new_password: str, confirm_password: str) -> None:
        require_min_length(new_password, "La contraseña", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("Las contraseñas no coinciden")

        if not self._users.update_password(int(user_id), password_hash=generate_password_hash(new_password)):
            raise NotFoundError("Usuario no encontrado")
        logger.info("Password changed for user_id=%s", user_id)


class UserService:
    """Use cases: manage employee accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_all(self, current: SessionUser) -> list[User]:
        require_admin(current)
        return list(self._users.list_all())

    @staticmethod
    def list_sedes(users: Iterable[User]) -> list[str]:
        """Distinct non-empty sedes, in first-seen order."""

        seen: dict[str, None] = {}
        for u in users:
            if u.sede:
                seen.setdefault(u.sede, None)
        return list(seen)

    def create_account(
        self,
        current: SessionUser,
        *,
        email: str,
        password: str,
        nombre: str,
        apellido: str = "",
        role: Role = Role.USER,
        sede: Optional[str] = None,
        area: Optional[str] = None,
    ) -> int:
        require_admin(current)

        email = require_email(email)
        nombre = require_non_empty(nombre, "Nombre")
        require_min_length(password, "La contraseña", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("Ya existe un usuario con ese email")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            nombre=nombre,
            apellido=(apellido or "").strip(),
            role=role,
            sede=(sede or "").strip() or None,
            area=(area or "").strip() or None,
        )
        logger.info("User %s created by %s", user_id, current.user_id)
        return user_id

    def set_active(self, current: SessionUser, *, user_id: int, is_active: bool) -> None:
        require_admin(current)

        if int(user_id) == current.user_id and not is_active:
            raise ValidationError("No puedes desactivar tu propia cuenta")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("Usuario no encontrado")

        self._users.set_active(int(user_id), is_active=bool(is_active))
        logger.info("User %s set activo=%s by %s", user_id, is_active, current.user_id)
