from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DayOff:
    """Domain entity: a scheduled day off (día libre) for one employee."""

    day_off_id: int
    user_id: int
    fecha: date
    all_day: bool = True
