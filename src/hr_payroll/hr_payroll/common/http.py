"""Flask helpers shared by the JSON controllers."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..core.permissions import has_permission
from .serialization import to_json

logger = logging.getLogger(__name__)


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": to_json(data)}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("El cuerpo de la petición debe ser un objeto JSON")
    return data


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Debe iniciar sesión para continuar", 401)
        return view(*args, **kwargs)

    return wrapper


def permission_required(permission: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Debe iniciar sesión para continuar", 401)
            try:
                role = current_role()
            except ValueError:
                return fail("No tiene permisos para esta acción", 403)
            if not has_permission(role, permission):
                return fail("No tiene permisos para esta acción", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    status_by_type = (
        (NotFoundError, 404),
        (AuthenticationError, 401),
        (AuthorizationError, 403),
        (ValidationError, 400),
    )

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status in status_by_type:
            if isinstance(e, exc_type):
                return fail(str(e), status)
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Error interno del sistema: {e}", 500)
        return fail("Error interno del sistema", 500)
