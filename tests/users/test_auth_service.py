from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from shift_tracker.core.enums import Role
from shift_tracker.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from shift_tracker.users.model import User
from shift_tracker.users.service import INACTIVE_ACCOUNT, INVALID_CREDENTIALS, AuthService, UserService


class InMemoryUsers:
    def __init__(self, *users: User):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.users_by_id.values():
            if u.email == email.strip().lower():
                return u
        return None

    def create_user(self, *, email, password_hash, nombre, apellido, role, sede, area) -> int:
        user_id = max(self.users_by_id, default=0) + 1
        self.users_by_id[user_id] = User(user_id, email, password_hash, nombre, apellido, role, sede, area)
        return user_id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        u = self.users_by_id.get(user_id)
        if not u:
            return False
        self.users_by_id[user_id] = replace(u, is_active=is_active)
        return True

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        u = self.users_by_id.get(user_id)
        if not u:
            return False
        self.users_by_id[user_id] = replace(u, password_hash=password_hash)
        return True

    def list_active(self, *, exclude_area=None):
        return [u for u in self.users_by_id.values() if u.is_active and u.area != exclude_area]

    def list_all(self):
        return list(self.users_by_id.values())


def _user(user_id: int, email: str, *, role=Role.USER, is_active=True, password="secret1") -> User:
    return User(
        user_id=user_id,
        email=email,
        password_hash=generate_password_hash(password),
        nombre="Ana",
        apellido="Pérez",
        role=role,
        sede="Lima",
        area="operaciones",
        is_active=is_active,
    )


def test_authenticate_matches_email_case_insensitively():
    svc = AuthService(InMemoryUsers(_user(1, "ana@example.com")))

    s_user = svc.authenticate("  ANA@Example.com ", "secret1")

    assert s_user.user_id == 1
    assert s_user.full_name == "Ana Pérez"
    assert s_user.is_admin is False


def test_authenticate_wrong_password_and_unknown_email_look_the_same():
    svc = AuthService(InMemoryUsers(_user(1, "ana@example.com")))

    with pytest.raises(AuthenticationError) as bad_pw:
        svc.authenticate("ana@example.com", "nope")
    with pytest.raises(AuthenticationError) as unknown:
        svc.authenticate("nadie@example.com", "secret1")

    assert str(bad_pw.value) == str(unknown.value) == INVALID_CREDENTIALS


def test_inactive_account_rejected_after_password_check():
    svc = AuthService(InMemoryUsers(_user(1, "ana@example.com", is_active=False)))

    with pytest.raises(AuthenticationError) as e:
        svc.authenticate("ana@example.com", "secret1")
    assert str(e.value) == INACTIVE_ACCOUNT

    with pytest.raises(AuthenticationError) as e:
        svc.authenticate("ana@example.com", "wrong")
    assert str(e.value) == INVALID_CREDENTIALS


def test_admin_by_role_or_by_configured_email():
    users = InMemoryUsers(
        _user(1, "jefe@example.com", role=Role.ADMIN),
        _user(2, "admin_oficinas@example.com"),
        _user(3, "ana@example.com"),
    )
    svc = AuthService(users, admin_emails=["Admin_Oficinas@example.com"])

    assert svc.load_session_user(1).is_admin
    assert svc.load_session_user(2).is_admin
    assert not svc.load_session_user(3).is_admin


def test_session_dropped_when_user_deactivated():
    users = InMemoryUsers(_user(1, "ana@example.com"))
    svc = AuthService(users)
    assert svc.load_session_user(1).user_id == 1

    users.set_active(1, is_active=False)

    with pytest.raises(AuthenticationError):
        svc.load_session_user(1)
    with pytest.raises(AuthenticationError):
        svc.load_session_user(99)


def test_change_password_rules():
    users = InMemoryUsers(_user(1, "ana@example.com"))
    svc = AuthService(users)

    with pytest.raises(ValidationError):
        svc.change_password(1, "abc", "abc")
    with pytest.raises(ValidationError):
        svc.change_password(1, "nueva123", "nueva124")

    svc.change_password(1, "nueva123", "nueva123")
    assert check_password_hash(users.get_by_id(1).password_hash, "nueva123")


def test_create_account_requires_admin_and_unique_email():
    users = InMemoryUsers(_user(1, "jefe@example.com", role=Role.ADMIN), _user(2, "ana@example.com"))
    auth = AuthService(users)
    svc = UserService(users)
    admin = auth.load_session_user(1)
    employee = auth.load_session_user(2)

    with pytest.raises(AuthorizationError):
        svc.create_account(employee, email="x@example.com", password="secret1", nombre="X")
    with pytest.raises(ConflictError):
        svc.create_account(admin, email="ANA@example.com", password="secret1", nombre="Otra")

    new_id = svc.create_account(admin, email="Luis@Example.com", password="secret1", nombre=" Luis ", sede="Callao")
    created = users.get_by_id(new_id)
    assert created.email == "luis@example.com"
    assert created.nombre == "Luis"
    assert created.role == Role.USER


def test_admin_cannot_deactivate_self():
    users = InMemoryUsers(_user(1, "jefe@example.com", role=Role.ADMIN), _user(2, "ana@example.com"))
    admin = AuthService(users).load_session_user(1)
    svc = UserService(users)

    with pytest.raises(ValidationError):
        svc.set_active(admin, user_id=1, is_active=False)

    svc.set_active(admin, user_id=2, is_active=False)
    assert users.get_by_id(2).is_active is False


def test_list_sedes_first_seen_distinct():
    users = [
        replace(_user(1, "a@example.com"), sede="Lima"),
        replace(_user(2, "b@example.com"), sede=None),
        replace(_user(3, "c@example.com"), sede="Arequipa"),
        replace(_user(4, "d@example.com"), sede="Lima"),
    ]
    assert UserService.list_sedes(users) == ["Lima", "Arequipa"]
