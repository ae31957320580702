from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import DayOff


class DayOffRepository(Protocol):
    def get_for_user_and_date(self, *, user_id: int, fecha: date) -> Optional[DayOff]:
        raise NotImplementedError

    def create(self, *, user_id: int, fecha: date) -> Optional[int]:
        """Returns None when (user_id, fecha) already exists."""

        raise NotImplementedError

    def delete(self, day_off_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[DayOff]:
        """Ordered by fecha ascending."""

        raise NotImplementedError

    def list_for_users(self, user_ids: Iterable[int]) -> Sequence[dict]:
        """Days off of several users joined with user name/sede/area (calendar view)."""

        raise NotImplementedError
