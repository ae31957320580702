from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import duration_ms, format_duration, now_local
from ..core.constants import EVENT_COLOR_COMPLETED, EVENT_COLOR_IN_PROGRESS
from ..core.enums import ShiftStatus
from ..core.exceptions import ConflictError, ValidationError
from ..workspaces.service import WorkspaceService
from .model import Coordinates, TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)

LOCATION_UNAVAILABLE = "No se pudo obtener tu ubicación"
OPEN_SHIFT_EXISTS = "¡Tienes un turno abierto! Finalízalo antes de iniciar otro"


def parse_coordinates(payload: Optional[Mapping[str, Any]]) -> Coordinates:
    """Build Coordinates from a {latitude, longitude} mapping sent by the device."""

    if not payload:
        raise ValidationError(LOCATION_UNAVAILABLE)

    lat = payload.get("latitude")
    lng = payload.get("longitude")
    if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
        raise ValidationError(LOCATION_UNAVAILABLE)

    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        raise ValidationError(LOCATION_UNAVAILABLE)

    if not -90.0 <= lat_f <= 90.0 or not -180.0 <= lng_f <= 180.0:
        raise ValidationError("Coordenadas fuera de rango")
    return Coordinates(latitude=lat_f, longitude=lng_f)


@dataclass(frozen=True)
class ShiftClosed:
    entry: TimeEntry
    worked: str


class TimeEntryService:
    """Use cases: clock in, clock out and the shift calendar."""

    def __init__(self, entries: TimeEntryRepository):
        self._entries = entries

    def get_open_shift(self, user_id: int) -> Optional[TimeEntry]:
        return self._entries.get_open_for_user(int(user_id))

    def list_entries(self, user_id: int) -> list[TimeEntry]:
        return list(self._entries.list_for_user(int(user_id)))

    def start_shift(
        self,
        user_id: int,
        *,
        workplace: Optional[str],
        coords: Coordinates,
        custom_workplace: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TimeEntry:
        now = now or now_local()

        if self._entries.get_open_for_user(int(user_id)):
            raise ConflictError(OPEN_SHIFT_EXISTS)

        name = WorkspaceService.resolve_workplace(workplace, custom_workplace)
        entry = self._entries.create_entry(
            user_id=int(user_id),
            workplace=name,
            start_time=now,
            start_location=coords,
        )
        if entry is None:
            raise ConflictError(OPEN_SHIFT_EXISTS)
        logger.info("Shift %s started by user %s at %r", entry.entry_id, user_id, name)
        return entry

    def end_shift(self, user_id: int, *, coords: Coordinates, now: Optional[datetime] = None) -> ShiftClosed:
        now = now or now_local()

        current = self._entries.get_open_for_user(int(user_id))
        if not current:
            raise ValidationError("No se encontró un turno activo")

        # end_time never precedes start_time
        end_time = max(now, current.start_time)

        closed = self._entries.close_entry(entry_id=current.entry_id, end_time=end_time, end_location=coords)
        if not closed:
            raise ConflictError("El turno ya fue finalizado")

        worked = format_duration(duration_ms(closed.start_time, closed.end_time))
        logger.info("Shift %s ended by user %s (worked %s)", closed.entry_id, user_id, worked)
        return ShiftClosed(entry=closed, worked=worked)

    def elapsed(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[str]:
        """Running timer of the open shift, or None when the user is not working."""

        current = self._entries.get_open_for_user(int(user_id))
        if not current:
            return None
        return format_duration(duration_ms(current.start_time, now or now_local()))

    def calendar_events(self, user_id: int, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        events = []
        for e in self._entries.list_for_user(int(user_id)):
            status = ShiftStatus.IN_PROGRESS if e.is_open else ShiftStatus.COMPLETED
            events.append(
                {
                    "id": e.entry_id,
                    "title": e.workplace,
                    "start": e.start_time,
                    "end": e.end_time or now,
                    "status": status.value,
                    "color": EVENT_COLOR_IN_PROGRESS if e.is_open else EVENT_COLOR_COMPLETED,
                }
            )
        return events
