"""Filesystem bucket for uploaded payslip files.

Objects are addressed by a relative path inside the bucket
(e.g. ``12/2025-3.pdf``) and exposed through a public URL of the form
``{base_url}/storage/{bucket}/{path}``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterable

from ..core.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)


class FileStorage:
    def __init__(self, root_dir: str | Path, bucket: str, *, public_base_url: str = ""):
        self._bucket = bucket
        self._root = (Path(root_dir) / bucket).resolve()
        self._base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        if not path or path.startswith(("/", "\\")):
            raise StorageError("Ruta de archivo no es válida")
        full = (self._root / path).resolve()
        try:
            full.relative_to(self._root)
        except ValueError:
            raise StorageError("Ruta de archivo no es válida")
        return full

    def normalize(self, path: str) -> str:
        """Canonical object name ('a/../b/x.pdf' -> 'b/x.pdf'); raises StorageError outside the bucket."""

        return self._resolve(path).relative_to(self._root).as_posix()

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def upload(self, path: str, data: bytes, *, upsert: bool = False) -> str:
        full = self._resolve(path)
        if full.exists() and not upsert:
            raise StorageError("El archivo ya existe")
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            tmp = full.with_name(full.name + ".part")
            tmp.write_bytes(data)
            os.replace(tmp, full)
        except OSError as e:
            logger.exception("Upload to %s/%s failed", self._bucket, path)
            raise StorageError(f"No se pudo guardar el archivo: {e.strerror or e}")
        return path

    def public_url(self, path: str) -> str:
        return f"{self._base_url}/storage/{self._bucket}/{path}"

    def path_from_public_url(self, url: str) -> str:
        marker = f"/storage/{self._bucket}/"
        _, sep, path = (url or "").partition(marker)
        if not sep or not path:
            raise StorageError("URL de archivo no es válida")
        return path

    def remove(self, paths: Iterable[str]) -> None:
        """Delete objects; a path that is already missing is not an error."""

        for path in paths:
            full = self._resolve(path)
            try:
                full.unlink()
            except FileNotFoundError:
                logger.warning("Object %s/%s already missing", self._bucket, path)
            except OSError as e:
                logger.exception("Delete of %s/%s failed", self._bucket, path)
                raise StorageError(f"No se pudo eliminar el archivo: {e.strerror or e}")

    def open(self, path: str) -> BinaryIO:
        full = self._resolve(path)
        if not full.is_file():
            raise NotFoundError("Archivo no encontrado")
        return full.open("rb")
