from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.validators import parse_enum
from ..common.web import admin_required, current_role, current_user_id, json_body, login_required, ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["employee_id"] = s_user.employee_id
        return ok(s_user, "Sesión iniciada")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Sesión cerrada")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(
            {
                "user_id": session.get("user_id"),
                "full_name": session.get("name"),
                "role": session.get("role"),
                "employee_id": session.get("employee_id"),
            }
        )

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return ok(container.user_service.list_users())

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        body = json_body()
        user_id = container.user_service.create_account(
            current_role=current_role(),
            username=body.get("username", ""),
            password=body.get("password", ""),
            full_name=body.get("full_name", ""),
            role=parse_enum(Role, body.get("role", "employee"), "Rol"),
            employee_id=body.get("employee_id"),
        )
        return ok({"user_id": user_id}, "Usuario creado", 201)

    @app.route("/api/users/<int:user_id>", methods=["PATCH"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        body = json_body()
        container.user_service.set_active(
            current_role=current_role(),
            current_user_id=current_user_id(),
            user_id=user_id,
            is_active=bool(body.get("is_active", True)),
        )
        return ok(message="Usuario actualizado")

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return ok(message="Usuario eliminado")
