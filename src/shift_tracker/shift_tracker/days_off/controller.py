from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_body, login_required, ok
from ..core.constants import ALL
from ..core.exceptions import ValidationError
from ..users.service import UserService
from .service import user_color


def register(app: Flask, container) -> None:
    @app.route("/api/days-off", methods=["GET"], endpoint="my_days_off")
    @login_required
    def my_days_off():
        days = container.day_off_service.list_for_user(g.current_user.user_id)
        return ok(
            {
                "days_off": [
                    {"id": d.day_off_id, "fecha": d.fecha.isoformat(), "todo_el_dia": d.all_day}
                    for d in days
                ],
                "color": user_color(g.current_user.user_id),
            }
        )

    @app.route("/api/admin/sedes", methods=["GET"], endpoint="admin_sedes")
    @admin_required
    def admin_sedes():
        users = container.day_off_service.assignable_users()
        return ok(
            {
                "sedes": UserService.list_sedes(users),
                "users": [
                    {"id": u.user_id, "nombre": u.nombre, "apellido": u.apellido, "sede": u.sede}
                    for u in users
                ],
            }
        )

    @app.route("/api/admin/days-off", methods=["GET"], endpoint="admin_days_off")
    @admin_required
    def admin_days_off():
        sede = request.args.get("sede") or ALL
        user_id = request.args.get("user_id") or ALL

        days = container.day_off_service.list_filtered(sede=sede, user_id=user_id)
        events = container.day_off_service.calendar_events(days)
        return ok(
            {
                "days_off": [dict(d, fecha=d["fecha"].isoformat()) for d in days],
                "events": [dict(e, start=e["start"].isoformat(), end=e["end"].isoformat()) for e in events],
                "legend": container.day_off_service.legend(days),
            }
        )

    @app.route("/api/admin/days-off", methods=["POST"], endpoint="admin_days_off_create")
    @admin_required
    def admin_days_off_create():
        data = json_body()
        try:
            user_id = int(data.get("user_id") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Selecciona un usuario y una fecha")
        fecha = parse_iso_date(data["fecha"]) if data.get("fecha") else None

        day_off_id = container.day_off_service.assign(g.current_user, user_id=user_id, fecha=fecha)
        return ok({"id": day_off_id}, status=201, message="Día libre agregado correctamente")

    @app.route("/api/admin/days-off/<int:day_off_id>", methods=["DELETE"], endpoint="admin_days_off_delete")
    @admin_required
    def admin_days_off_delete(day_off_id: int):
        container.day_off_service.delete(g.current_user, day_off_id=day_off_id)
        return ok(message="Día libre eliminado correctamente")
