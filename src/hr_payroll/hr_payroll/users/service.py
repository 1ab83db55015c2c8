from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_enum, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.permissions import permissions_for
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    username: str
    role: Role

    @property
    def permissions(self) -> list[str]:
        return sorted(permissions_for(self.role))


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for username=%s", user.username)
            raise AuthenticationError("Usuario o contraseña incorrectos")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            username=user.username,
            role=user.role,
        )


class UserService:
    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(self, *, full_name: str, username: str, password: str, role: str) -> int:
        full_name = require_non_empty(full_name, "Nombre completo")
        username = require_non_empty(username, "Usuario")
        require_min_length(password, "Contraseña", 6)
        role_enum = require_enum(Role, role, "Rol")

        if self._users.get_by_username(username):
            raise ValidationError("El usuario ya existe")

        user_id = self._users.create_user(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=role_enum,
        )
        logger.info("User %s created with role %s", username, role_enum.value)
        return user_id

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"Usuario {user_id} no encontrado")
        return user

    def list_users(self) -> list[dict]:
        return [
            {
                "user_id": u.user_id,
                "full_name": u.full_name,
                "username": u.username,
                "role": u.role.value,
                "is_active": u.is_active,
            }
            for u in self._users.list_all()
        ]

    def set_active(self, *, acting_user_id: int, user_id: int, is_active: bool) -> None:
        if int(acting_user_id) == int(user_id) and not is_active:
            raise ValidationError("No puede desactivar su propia cuenta")
        self.get_user(user_id)
        if not self._users.set_active(int(user_id), is_active=bool(is_active)):
            raise ValidationError("No se pudo actualizar el usuario")
