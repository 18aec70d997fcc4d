"""Helpers shared by the JSON controllers."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .logging_config import get_logger

log = get_logger("web")


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses / enums / dates into plain JSON types."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bytes):
        return None
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def ok(data: Any = None, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True, "data": to_jsonable(data)}
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(message: str, status: int = 400, **extra):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> int:
    return int(session["user_id"])


def current_employee_id() -> Optional[int]:
    value = session.get("employee_id")
    return int(value) if value else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Debes iniciar sesión", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Debes iniciar sesión", 401)
            if session.get("role") not in allowed:
                return fail("No tienes permisos para esta acción", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


hr_required = roles_required(Role.ADMIN, Role.HR)
admin_required = roles_required(Role.ADMIN)


def register_error_handlers(app: Flask) -> None:
    status_map = (
        (ValidationError, 400),
        (AuthenticationError, 401),
        (AuthorizationError, 403),
        (NotFoundError, 404),
        (ConflictError, 409),
    )

    def _domain_error(e: DomainError):
        for exc_type, status in status_map:
            if isinstance(e, exc_type):
                return fail(str(e), status)
        return fail(str(e), 400)

    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        log.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"Error interno del servidor: {e}", 500)
        return fail("Error interno del servidor", 500)

    app.register_error_handler(DomainError, _domain_error)
    app.register_error_handler(Exception, _unexpected)
