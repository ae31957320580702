from __future__ import annotations

from flask import Flask, g, request, send_file

from ..common.web import admin_required, fail, login_required, ok
from ..core.constants import PAYSLIP_BUCKET
from ..core.exceptions import StorageError, ValidationError
from .model import Payslip


def _payslip_to_dict(p: Payslip) -> dict:
    return {
        "id": p.payslip_id,
        "user_id": p.user_id,
        "ano": p.year,
        "mes": p.month,
        "arquivo_url": p.file_url,
        "download_url": f"/api/payslips/{p.payslip_id}/file",
        "uploaded_by": p.uploaded_by,
        "created_at": p.created_at.isoformat() if p.created_at else None,
    }


def register(app: Flask, container) -> None:
    @app.route("/api/payslips", methods=["GET"], endpoint="my_payslips")
    @login_required
    def my_payslips():
        items = container.payslip_service.list_for_user(g.current_user, user_id=g.current_user.user_id)
        return ok({"payslips": [_payslip_to_dict(p) for p in items]})

    @app.route("/api/admin/users/<int:user_id>/payslips", methods=["GET"], endpoint="admin_user_payslips")
    @admin_required
    def admin_user_payslips(user_id: int):
        items = container.payslip_service.list_for_user(g.current_user, user_id=user_id)
        return ok({"payslips": [_payslip_to_dict(p) for p in items]})

    @app.route("/api/admin/payslips", methods=["POST"], endpoint="admin_payslips_upload")
    @admin_required
    def admin_payslips_upload():
        upload = request.files.get("archivo")
        if upload is None or not upload.filename:
            raise ValidationError("Selecciona un archivo")

        try:
            user_id = int(request.form.get("user_id") or 0)
        except ValueError:
            raise ValidationError("Usuario no es válido")

        payslip = container.payslip_service.upload(
            g.current_user,
            user_id=user_id,
            year=request.form.get("ano"),
            month=request.form.get("mes"),
            filename=upload.filename,
            data=upload.read(),
        )
        return ok(
            {"payslip": _payslip_to_dict(payslip)},
            status=201,
            message="¡Boleta subida/actualizada correctamente!",
        )

    @app.route("/api/admin/payslips/<int:payslip_id>", methods=["DELETE"], endpoint="admin_payslips_delete")
    @admin_required
    def admin_payslips_delete(payslip_id: int):
        container.payslip_service.delete(g.current_user, payslip_id=payslip_id)
        return ok(message="Boleta eliminada correctamente")

    @app.route("/api/payslips/<int:payslip_id>/file", methods=["GET"], endpoint="payslip_file")
    @login_required
    def payslip_file(payslip_id: int):
        f = container.payslip_service.open_file(g.current_user, payslip_id=payslip_id)
        return send_file(f.stream, mimetype=f.mimetype, as_attachment=True, download_name=f.download_name)

    @app.route(f"/storage/{PAYSLIP_BUCKET}/<path:path>", methods=["GET"], endpoint="payslip_object")
    @login_required
    def payslip_object(path: str):
        # Objects are stored under "{user_id}/..."; only the owner or an admin may read them.
        # Check the owner on the normalised name so "2/../1/x.pdf" is seen as user 1's.
        try:
            path = container.payslip_storage.normalize(path)
        except StorageError:
            return fail("Archivo no encontrado", 404)
        owner = path.split("/", 1)[0]
        if owner != str(g.current_user.user_id) and not g.current_user.is_admin:
            return fail("No tienes permisos para ver esta boleta", 403)
        stream = container.payslip_storage.open(path)
        return send_file(stream, download_name=path.rsplit("/", 1)[-1])
