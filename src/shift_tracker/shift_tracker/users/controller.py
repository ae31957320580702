from __future__ import annotations

from flask import Flask, g, session

from ..common.web import admin_required, fail, json_body, login_required, ok
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User


def _user_to_dict(u: User) -> dict:
    return {
        "id": u.user_id,
        "email": u.email,
        "nombre": u.nombre,
        "apellido": u.apellido,
        "role": u.role.value,
        "sede": u.sede,
        "area": u.area,
        "activo": u.is_active,
    }


def register(app: Flask, container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except AuthenticationError as e:
            session.clear()
            return fail(str(e), 401)

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id

        return ok({"user": s_user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Sesión cerrada")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok({"user": g.current_user.to_dict()})

    @app.route("/api/me/password", methods=["POST"], endpoint="me_password")
    @login_required
    def me_password():
        data = json_body()
        container.auth_service.change_password(
            g.current_user.user_id,
            data.get("password", ""),
            data.get("confirm_password", ""),
        )
        return ok(message="Contraseña actualizada correctamente")

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        users = container.user_service.list_all(g.current_user)
        return ok({"users": [_user_to_dict(u) for u in users]})

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_users_create")
    @admin_required
    def admin_users_create():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.USER.value)
        except ValueError:
            raise ValidationError("Rol no es válido")

        user_id = container.user_service.create_account(
            g.current_user,
            email=data.get("email", ""),
            password=data.get("password", ""),
            nombre=data.get("nombre", ""),
            apellido=data.get("apellido", ""),
            role=role,
            sede=data.get("sede"),
            area=data.get("area"),
        )
        return ok({"id": user_id}, status=201)

    @app.route("/api/admin/users/<int:user_id>/active", methods=["POST"], endpoint="admin_users_active")
    @admin_required
    def admin_users_active(user_id: int):
        data = json_body()
        if "activo" not in data:
            raise ValidationError("Falta el campo activo")
        activo = data["activo"]
        if isinstance(activo, str):
            activo = activo.strip().lower() in {"1", "true", "si", "sí", "on"}
        container.user_service.set_active(g.current_user, user_id=user_id, is_active=bool(activo))
        return ok(message="Usuario actualizado")
