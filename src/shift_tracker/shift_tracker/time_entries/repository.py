from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Coordinates, TimeEntry


class TimeEntryRepository(Protocol):
    def get_open_for_user(self, user_id: int) -> Optional[TimeEntry]:
        """Latest entry of the user with end_time NULL."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[TimeEntry]:
        """All entries of the user, newest start_time first."""

        raise NotImplementedError

    def create_entry(
        self,
        *,
        user_id: int,
        workplace: str,
        start_time: datetime,
        start_location: Coordinates,
    ) -> Optional[TimeEntry]:
        """Insert an open entry; returns None if the user already has an open one."""

        raise NotImplementedError

    def close_entry(self, *, entry_id: int, end_time: datetime, end_location: Coordinates) -> Optional[TimeEntry]:
        """Set end_time on an open entry; returns None if the entry is gone or already closed."""

        raise NotImplementedError
