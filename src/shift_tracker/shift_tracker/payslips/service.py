from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from typing import BinaryIO

from ..common.validators import require_month, require_year
from ..core.constants import PAYSLIP_EXTENSIONS
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..users.service import SessionUser, require_admin
from .model import Payslip
from .repository import PayslipRepository
from .storage import FileStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayslipFile:
    stream: BinaryIO
    download_name: str
    mimetype: str


def payslip_object_name(user_id: int, year: int, month: int, extension: str) -> str:
    return f"{int(user_id)}/{int(year)}-{int(month)}.{extension}"


def file_extension(filename: str) -> str:
    name = (filename or "").strip()
    if "." not in name:
        raise ValidationError("El archivo debe ser PDF o imagen (pdf, png, jpg, jpeg)")
    ext = name.rsplit(".", 1)[-1].lower()
    if ext not in PAYSLIP_EXTENSIONS:
        raise ValidationError("El archivo debe ser PDF o imagen (pdf, png, jpg, jpeg)")
    return ext


class PayslipService:
    """Use cases: upload, list, download and delete payslips."""

    def __init__(self, payslips: PayslipRepository, storage: FileStorage, users: UserRepository):
        self._payslips = payslips
        self._storage = storage
        self._users = users

    def upload(
        self,
        current: SessionUser,
        *,
        user_id: int,
        year,
        month,
        filename: str,
        data: bytes,
    ) -> Payslip:
        require_admin(current, "Solo los administradores pueden subir boletas")

        year = require_year(year)
        month = require_month(month)
        ext = file_extension(filename)
        if not data:
            raise ValidationError("Selecciona un archivo")

        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("Usuario no encontrado")

        previous = {p.storage_path for p in self._payslips.list_for_user(int(user_id)) if (p.year, p.month) == (year, month)}

        path = payslip_object_name(user_id, year, month, ext)
        backup = None
        if self._storage.exists(path):
            with self._storage.open(path) as f:
                backup = f.read()

        self._storage.upload(path, data, upsert=True)
        url = self._storage.public_url(path)

        try:
            payslip_id = self._payslips.upsert(
                user_id=int(user_id),
                year=year,
                month=month,
                file_url=url,
                storage_path=path,
                uploaded_by=current.user_id,
            )
        except Exception:
            # Row not saved: leave the bucket as it was before this upload.
            logger.warning("Saving payslip row for %s failed; rolling back the stored file", path)
            if backup is None:
                self._storage.remove([path])
            else:
                self._storage.upload(path, backup, upsert=True)
            raise

        # Same period re-uploaded with another extension: drop the orphaned object.
        stale = previous - {path}
        if stale:
            self._storage.remove(stale)

        logger.info("Payslip %s/%s-%s uploaded by %s", user_id, year, month, current.user_id)
        saved = self._payslips.get_by_id(payslip_id)
        if not saved:
            raise NotFoundError("Boleta no encontrada")
        return saved

    def list_for_user(self, current: SessionUser, *, user_id: int) -> list[Payslip]:
        if int(user_id) != current.user_id and not current.is_admin:
            raise AuthorizationError("No tienes permisos para ver estas boletas")
        return list(self._payslips.list_for_user(int(user_id)))

    def delete(self, current: SessionUser, *, payslip_id: int) -> None:
        require_admin(current)

        payslip = self._payslips.get_by_id(int(payslip_id))
        if not payslip:
            raise NotFoundError("Boleta no encontrada")

        # File first: a storage failure leaves the row (and its link) intact.
        path = payslip.storage_path or self._storage.path_from_public_url(payslip.file_url)
        self._storage.remove([path])

        if not self._payslips.delete(payslip.payslip_id):
            raise NotFoundError("Boleta no encontrada")
        logger.info("Payslip %s deleted by %s", payslip.payslip_id, current.user_id)

    def open_file(self, current: SessionUser, *, payslip_id: int) -> PayslipFile:
        payslip = self._payslips.get_by_id(int(payslip_id))
        if not payslip:
            raise NotFoundError("Boleta no encontrada")
        if payslip.user_id != current.user_id and not current.is_admin:
            raise AuthorizationError("No tienes permisos para ver esta boleta")

        ext = payslip.storage_path.rsplit(".", 1)[-1]
        mimetype = mimetypes.guess_type(payslip.storage_path)[0] or "application/octet-stream"
        return PayslipFile(
            stream=self._storage.open(payslip.storage_path),
            download_name=f"boleta_{payslip.year}_{payslip.month:02d}.{ext}",
            mimetype=mimetype,
        )
