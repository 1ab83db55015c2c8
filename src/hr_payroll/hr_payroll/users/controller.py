from __future__ import annotations

from flask import Flask, session

from ..common.http import current_user_id, json_body, login_required, ok, permission_required
from ..core.permissions import USERS_MANAGE, permissions_for
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return ok(
            {
                "user_id": s_user.user_id,
                "full_name": s_user.full_name,
                "username": s_user.username,
                "role": s_user.role,
                "permissions": s_user.permissions,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return ok({"message": "Sesión cerrada"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        role = Role(session["role"])
        return ok(
            {
                "user_id": current_user_id(),
                "full_name": session.get("name"),
                "role": role,
                "permissions": sorted(permissions_for(role)),
            }
        )

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @permission_required(USERS_MANAGE)
    def list_users():
        return ok(container.user_service.list_users())

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @permission_required(USERS_MANAGE)
    def create_user():
        data = json_body()
        user_id = container.user_service.create_user(
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=data.get("role", ""),
        )
        return ok({"user_id": user_id}, 201)

    @app.route("/api/users/<int:user_id>/active", methods=["PATCH"], endpoint="users_set_active")
    @permission_required(USERS_MANAGE)
    def set_user_active(user_id: int):
        data = json_body()
        is_active = bool(data.get("is_active", True))
        container.user_service.set_active(acting_user_id=current_user_id(), user_id=user_id, is_active=is_active)
        return ok({"user_id": user_id, "is_active": is_active})
