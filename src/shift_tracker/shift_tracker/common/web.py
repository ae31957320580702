"""Flask helpers shared by the feature controllers.

Every endpoint answers JSON. Domain exceptions become
`{"success": false, "message": ...}` with the status code carried by the
exception class, so the client can show the message as-is.
"""

from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import AuthenticationError, DomainError, ValidationError

logger = logging.getLogger(__name__)

EXTENSION_KEY = "shift_tracker"


def get_container():
    return current_app.extensions[EXTENSION_KEY]


def ok(payload: dict | None = None, status: int = 200, **extra):
    body = {"success": True}
    if payload:
        body.update(payload)
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        # Form posts (e.g. multipart uploads) fall back to form fields
        return request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Cuerpo de la petición no es válido")
    return data


def login_required(view):
    """Re-validate the session user on every request (deactivated users are logged out)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user_id = session.get("user_id")
        if user_id is None:
            return fail("No hay sesión activa", 401)
        try:
            g.current_user = get_container().auth_service.load_session_user(int(user_id))
        except AuthenticationError as e:
            session.clear()
            return fail(str(e), 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not g.current_user.is_admin:
            return fail("No tienes permisos para esta acción", 403)
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return fail(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        if e.code == 404:
            return fail("Recurso no encontrado", 404)
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Error del sistema: {e}", 500)
        return fail("Error del sistema, inténtalo nuevamente", 500)
