from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Union

from ..core.constants import ALL
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..users.service import SessionUser, require_admin
from .model import DayOff
from .repository import DayOffRepository

logger = logging.getLogger(__name__)

# Admin accounts never get days off assigned.
EXCLUDED_AREA = "admin"

DUPLICATE_DAY_OFF = "Este usuario ya tiene un día libre para esta fecha"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def user_color(user_id: Union[int, str]) -> str:
    """Stable per-user calendar colour.

    Same hash as the web client used (``(h << 5) - h + code`` with the shift done
    in 32-bit integer arithmetic), so colours match across both.
    """

    acc = 0
    for ch in str(user_id):
        acc = ord(ch) + (_to_int32(_to_int32(acc) << 5) - acc)
    return f"hsl({abs(acc) % 360}, 70%, 60%)"


class DayOffService:
    """Use cases: assign, remove and list days off (admin calendar + employee view)."""

    def __init__(self, days_off: DayOffRepository, users: UserRepository):
        self._days_off = days_off
        self._users = users

    def assignable_users(self):
        return list(self._users.list_active(exclude_area=EXCLUDED_AREA))

    def assign(self, current: SessionUser, *, user_id: int, fecha: Optional[date]) -> int:
        require_admin(current)

        if not user_id or fecha is None:
            raise ValidationError("Selecciona un usuario y una fecha")

        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise NotFoundError("Usuario no encontrado")

        if self._days_off.get_for_user_and_date(user_id=int(user_id), fecha=fecha):
            raise ConflictError(DUPLICATE_DAY_OFF)

        day_off_id = self._days_off.create(user_id=int(user_id), fecha=fecha)
        if day_off_id is None:
            raise ConflictError(DUPLICATE_DAY_OFF)
        logger.info("Day off %s (%s) assigned to user %s by %s", day_off_id, fecha, user_id, current.user_id)
        return day_off_id

    def delete(self, current: SessionUser, *, day_off_id: int) -> None:
        require_admin(current)

        if not self._days_off.delete(int(day_off_id)):
            raise NotFoundError("Día libre no encontrado")
        logger.info("Day off %s deleted by %s", day_off_id, current.user_id)

    def list_for_user(self, user_id: int) -> list[DayOff]:
        return list(self._days_off.list_for_user(int(user_id)))

    def list_filtered(self, *, sede: str = ALL, user_id: Union[int, str] = ALL) -> list[dict]:
        """Days off of active non-admin users, narrowed by sede and then by user."""

        users = self.assignable_users()

        if sede == ALL:
            ids = [u.user_id for u in users]
        else:
            ids = [u.user_id for u in users if u.sede == sede]

        if str(user_id) != ALL:
            ids = [i for i in ids if str(i) == str(user_id)]

        if not ids:
            return []
        return list(self._days_off.list_for_users(ids))

    @staticmethod
    def calendar_events(days: Iterable[dict]) -> list[dict]:
        events = []
        for d in days:
            u = d.get("user") or {"nombre": "Desconocido", "apellido": ""}
            events.append(
                {
                    "id": d["id"],
                    "title": f"{u['nombre']} {u['apellido']}",
                    "start": d["fecha"],
                    "end": d["fecha"],
                    "all_day": True,
                    "color": user_color(d["user_id"]),
                }
            )
        return events

    @staticmethod
    def legend(days: Iterable[dict]) -> list[dict]:
        """One entry per user appearing in the calendar, first-seen order."""

        seen: dict[int, dict] = {}
        for d in days:
            u = d.get("user")
            if not u or u["id"] in seen:
                continue
            seen[u["id"]] = {
                "user_id": u["id"],
                "name": f"{u['nombre']} {u['apellido']}".strip(),
                "color": user_color(u["id"]),
            }
        return list(seen.values())
