from __future__ import annotations

from typing import Optional

from flask import Flask, g

from ..common.web import json_body, login_required, ok
from .model import Coordinates, TimeEntry
from .service import parse_coordinates


def _coords_to_dict(c: Optional[Coordinates]) -> Optional[dict]:
    if c is None:
        return None
    return {"latitude": c.latitude, "longitude": c.longitude}


def _entry_to_dict(e: TimeEntry) -> dict:
    return {
        "id": e.entry_id,
        "user_id": e.user_id,
        "workplace": e.workplace,
        "start_time": e.start_time.isoformat(),
        "end_time": e.end_time.isoformat() if e.end_time else None,
        "start_location": _coords_to_dict(e.start_location),
        "end_location": _coords_to_dict(e.end_location),
    }


def register(app: Flask, container) -> None:
    @app.route("/api/shifts", methods=["GET"], endpoint="shifts")
    @login_required
    def shifts():
        entries = container.time_entry_service.list_entries(g.current_user.user_id)
        return ok({"entries": [_entry_to_dict(e) for e in entries]})

    @app.route("/api/shifts/open", methods=["GET"], endpoint="shifts_open")
    @login_required
    def shifts_open():
        user_id = g.current_user.user_id
        current = container.time_entry_service.get_open_shift(user_id)
        return ok(
            {
                "working": current is not None,
                "entry": _entry_to_dict(current) if current else None,
                "elapsed": container.time_entry_service.elapsed(user_id) if current else None,
            }
        )

    @app.route("/api/shifts/start", methods=["POST"], endpoint="shifts_start")
    @login_required
    def shifts_start():
        data = json_body()
        entry = container.time_entry_service.start_shift(
            g.current_user.user_id,
            workplace=data.get("workplace"),
            custom_workplace=data.get("custom_workplace"),
            coords=parse_coordinates(data.get("location")),
        )
        return ok({"entry": _entry_to_dict(entry)}, status=201, message="¡Turno iniciado!")

    @app.route("/api/shifts/end", methods=["POST"], endpoint="shifts_end")
    @login_required
    def shifts_end():
        data = json_body()
        closed = container.time_entry_service.end_shift(
            g.current_user.user_id,
            coords=parse_coordinates(data.get("location")),
        )
        return ok(
            {"entry": _entry_to_dict(closed.entry), "worked": closed.worked},
            message=f"¡Turno finalizado! Tiempo trabajado: {closed.worked}",
        )

    @app.route("/api/shifts/calendar", methods=["GET"], endpoint="shifts_calendar")
    @login_required
    def shifts_calendar():
        events = container.time_entry_service.calendar_events(g.current_user.user_id)
        return ok(
            {
                "events": [
                    dict(ev, start=ev["start"].isoformat(), end=ev["end"].isoformat())
                    for ev in events
                ]
            }
        )
