from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest

from shift_tracker.core.constants import PAYSLIP_BUCKET
from shift_tracker.core.enums import Role
from shift_tracker.core.exceptions import AuthorizationError, NotFoundError, StorageError, ValidationError
from shift_tracker.payslips.model import Payslip
from shift_tracker.payslips.service import PayslipService, file_extension, payslip_object_name
from shift_tracker.payslips.storage import FileStorage
from shift_tracker.users.model import User
from shift_tracker.users.service import SessionUser


class InMemoryPayslips:
    def __init__(self):
        self.rows: dict[int, Payslip] = {}
        self._id = 0

    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        return self.rows.get(payslip_id)

    def list_for_user(self, user_id: int):
        return sorted((p for p in self.rows.values() if p.user_id == user_id), key=lambda p: p.payslip_id, reverse=True)

    def upsert(self, *, user_id, year, month, file_url, storage_path, uploaded_by) -> int:
        for p in self.rows.values():
            if (p.user_id, p.year, p.month) == (user_id, year, month):
                self.rows[p.payslip_id] = replace(p, file_url=file_url, storage_path=storage_path, uploaded_by=uploaded_by)
                return p.payslip_id
        self._id += 1
        self.rows[self._id] = Payslip(self._id, user_id, year, month, file_url, storage_path, uploaded_by)
        return self._id

    def delete(self, payslip_id: int) -> bool:
        return self.rows.pop(payslip_id, None) is not None


class InMemoryUsers:
    def __init__(self, *users: User):
        self.users_by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)


ADMIN = SessionUser(1, "jefe@example.com", "Jefe", "", Role.ADMIN, True)
ANA = SessionUser(2, "ana@example.com", "Ana", "Pérez", Role.USER, False)
LUIS = SessionUser(3, "luis@example.com", "Luis", "", Role.USER, False)


@pytest.fixture()
def storage(tmp_path):
    return FileStorage(tmp_path, PAYSLIP_BUCKET, public_base_url="http://testserver/")


@pytest.fixture()
def repo():
    return InMemoryPayslips()


@pytest.fixture()
def svc(repo, storage):
    users = InMemoryUsers(
        User(2, "ana@example.com", "x", "Ana", "Pérez", Role.USER),
        User(3, "luis@example.com", "x", "Luis", "", Role.USER),
    )
    return PayslipService(repo, storage, users)


def test_object_name_and_extension():
    assert payslip_object_name(12, 2025, 3, "pdf") == "12/2025-3.pdf"
    assert file_extension("Boleta Marzo.PDF") == "pdf"
    for bad in ("boleta", "boleta.docx", ""):
        with pytest.raises(ValidationError):
            file_extension(bad)


def test_upload_stores_file_and_row(svc, storage):
    p = svc.upload(ADMIN, user_id=2, year="2025", month="3", filename="marzo.pdf", data=b"%PDF-1")

    assert p.storage_path == "2/2025-3.pdf"
    assert p.file_url == "http://testserver/storage/boletas-pago/2/2025-3.pdf"
    assert p.uploaded_by == ADMIN.user_id
    assert storage.exists("2/2025-3.pdf")


def test_reupload_same_period_replaces_previous_file(svc, repo, storage):
    first = svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="marzo.pdf", data=b"old")
    second = svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="marzo.png", data=b"new")

    assert second.payslip_id == first.payslip_id
    assert len(repo.rows) == 1
    assert second.storage_path == "2/2025-3.png"
    assert not storage.exists("2/2025-3.pdf")
    assert storage.open("2/2025-3.png").read() == b"new"


def test_upload_rules(svc):
    with pytest.raises(AuthorizationError):
        svc.upload(ANA, user_id=2, year=2025, month=3, filename="a.pdf", data=b"x")
    with pytest.raises(ValidationError):
        svc.upload(ADMIN, user_id=2, year=2025, month=13, filename="a.pdf", data=b"x")
    with pytest.raises(ValidationError):
        svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.pdf", data=b"")
    with pytest.raises(NotFoundError):
        svc.upload(ADMIN, user_id=99, year=2025, month=3, filename="a.pdf", data=b"x")


def test_employee_sees_only_own_payslips(svc):
    svc.upload(ADMIN, user_id=2, year=2025, month=1, filename="a.pdf", data=b"x")
    svc.upload(ADMIN, user_id=2, year=2025, month=2, filename="b.pdf", data=b"x")

    assert [p.month for p in svc.list_for_user(ANA, user_id=2)] == [2, 1]
    assert len(svc.list_for_user(ADMIN, user_id=2)) == 2
    with pytest.raises(AuthorizationError):
        svc.list_for_user(LUIS, user_id=2)


def test_open_file_download_name_and_owner_check(svc):
    p = svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.jpg", data=b"img")

    f = svc.open_file(ANA, payslip_id=p.payslip_id)
    try:
        assert f.download_name == "boleta_2025_03.jpg"
        assert f.mimetype == "image/jpeg"
        assert f.stream.read() == b"img"
    finally:
        f.stream.close()

    with pytest.raises(AuthorizationError):
        svc.open_file(LUIS, payslip_id=p.payslip_id)


def test_delete_removes_file_then_row(svc, repo, storage):
    p = svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.pdf", data=b"x")

    svc.delete(ADMIN, payslip_id=p.payslip_id)

    assert not storage.exists("2/2025-3.pdf")
    assert repo.get_by_id(p.payslip_id) is None
    with pytest.raises(NotFoundError):
        svc.delete(ADMIN, payslip_id=p.payslip_id)


def test_delete_tolerates_missing_file(svc, repo, storage):
    p = svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.pdf", data=b"x")
    storage.remove(["2/2025-3.pdf"])

    svc.delete(ADMIN, payslip_id=p.payslip_id)
    assert repo.get_by_id(p.payslip_id) is None


def test_storage_rejects_paths_outside_bucket(storage):
    for bad in ("../secret.txt", "/etc/passwd", ""):
        with pytest.raises(StorageError):
            storage.upload(bad, b"x")
    with pytest.raises(NotFoundError):
        storage.open("2/missing.pdf")
    assert storage.path_from_public_url(storage.public_url("2/2025-3.pdf")) == "2/2025-3.pdf"


def test_storage_normalize(storage):
    assert storage.normalize("2/../1/2025-3.pdf") == "1/2025-3.pdf"
    assert storage.normalize("2/./2025-3.pdf") == "2/2025-3.pdf"
    with pytest.raises(StorageError):
        storage.normalize("2/../../outside.pdf")


class FailingUpsert(InMemoryPayslips):
    def upsert(self, **kwargs):
        raise RuntimeError("db down")


@pytest.fixture()
def failing_svc(storage):
    users = InMemoryUsers(User(2, "ana@example.com", "x", "Ana", "Pérez", Role.USER))
    return PayslipService(FailingUpsert(), storage, users)


def test_failed_row_removes_new_file(failing_svc, storage):
    with pytest.raises(RuntimeError):
        failing_svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.pdf", data=b"new")

    assert not storage.exists("2/2025-3.pdf")


def test_failed_row_restores_replaced_file(failing_svc, storage):
    storage.upload("2/2025-3.pdf", b"old")

    with pytest.raises(RuntimeError):
        failing_svc.upload(ADMIN, user_id=2, year=2025, month=3, filename="a.pdf", data=b"new")

    with storage.open("2/2025-3.pdf") as f:
        assert f.read() == b"old"
