from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """A geolocation fix reported by the client device."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: a shift (turno) from clock-in to clock-out.

    end_time is None while the shift is still open.
    """

    entry_id: int
    user_id: int
    workplace: str
    start_time: datetime
    end_time: Optional[datetime] = None
    start_location: Optional[Coordinates] = None
    end_location: Optional[Coordinates] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None
