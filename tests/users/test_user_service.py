from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.hr_payroll.hr_payroll.core.enums import Role
from src.hr_payroll.hr_payroll.core.exceptions import AuthenticationError, NotFoundError, ValidationError


def test_authenticate_success_returns_session_user(world):
    user_id = world.container.user_service.create_user(
        full_name="Laura Pérez", username="lperez", password="secreto1", role="rrhh"
    )

    su = world.container.auth_service.authenticate("  lperez ", "secreto1")

    assert su.user_id == user_id
    assert su.role == Role.HR
    assert "payroll.liquidate" in su.permissions
    assert "payroll.config" not in su.permissions


def test_authenticate_rejects_wrong_password(world):
    world.container.user_service.create_user(full_name="Laura", username="lperez", password="secreto1", role="rrhh")

    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate("lperez", "otra-clave")


def test_authenticate_rejects_inactive_and_unknown_users(world):
    user_id = world.container.user_service.create_user(
        full_name="Laura", username="lperez", password="secreto1", role="rrhh"
    )
    world.users.set_active(user_id, is_active=False)

    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate("lperez", "secreto1")
    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate("nadie", "secreto1")


def test_authenticate_placeholder_hash_is_rejected(world):
    world.users.create_user(full_name="Seed", username="seed", password_hash="CHANGE_ME", role=Role.ADMIN)

    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate("seed", "CHANGE_ME")


def test_create_user_validations(world):
    svc = world.container.user_service
    svc.create_user(full_name="Admin", username="admin", password="admin123", role="admin")

    with pytest.raises(ValidationError):
        svc.create_user(full_name="Otro", username="admin", password="admin123", role="admin")
    with pytest.raises(ValidationError):
        svc.create_user(full_name="Otro", username="otro", password="123", role="admin")
    with pytest.raises(ValidationError):
        svc.create_user(full_name="Otro", username="otro", password="admin123", role="root")
    with pytest.raises(ValidationError):
        svc.create_user(full_name="  ", username="otro", password="admin123", role="admin")


def test_password_is_stored_hashed(world):
    user_id = world.container.user_service.create_user(
        full_name="Admin", username="admin", password="admin123", role="admin"
    )

    stored = world.users.get_by_id(user_id)
    assert stored.password_hash != "admin123"
    assert stored.password_hash.split(":")[0] in {"scrypt", "pbkdf2"}


def test_users_cannot_deactivate_themselves(world):
    svc = world.container.user_service
    admin_id = svc.create_user(full_name="Admin", username="admin", password="admin123", role="admin")
    other_id = world.users.create_user(
        full_name="Carlos", username="carlos", password_hash=generate_password_hash("x1y2z3"), role=Role.EMPLOYEE
    )

    with pytest.raises(ValidationError):
        svc.set_active(acting_user_id=admin_id, user_id=admin_id, is_active=False)

    svc.set_active(acting_user_id=admin_id, user_id=other_id, is_active=False)
    assert world.users.get_by_id(other_id).is_active is False

    with pytest.raises(NotFoundError):
        svc.set_active(acting_user_id=admin_id, user_id=99, is_active=True)


def test_list_users_serializes_role(world):
    world.container.user_service.create_user(full_name="Admin", username="admin", password="admin123", role="admin")

    users = world.container.user_service.list_users()

    assert users == [{"user_id": 1, "full_name": "Admin", "username": "admin", "role": "admin", "is_active": True}]
