from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    username: str
    full_name: str
    role: Role
    employee_id: Optional[int]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        try:
            valid = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            valid = False

        if not valid:
            raise AuthenticationError("Usuario o contraseña incorrectos")

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            employee_id=user.employee_id,
        )


class UserService:
    """Use case: manage login accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        current_role: Role,
        username: str,
        password: str,
        full_name: str,
        role: Role,
        employee_id: Optional[int] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tienes permisos para crear usuarios")

        username = require_non_empty(username, "Usuario")
        full_name = require_non_empty(full_name, "Nombre")
        require_min_length(password, "Contraseña", MIN_PASSWORD_LENGTH)

        if role == Role.ADMIN:
            raise ValidationError("No se pueden crear administradores desde la API")
        if role == Role.EMPLOYEE and not employee_id:
            raise ValidationError("Un usuario empleado debe estar vinculado a una ficha de empleado")
        if self._users.get_by_username(username):
            raise ConflictError("El nombre de usuario ya existe")

        return self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=role,
            employee_id=int(employee_id) if employee_id else None,
        )

    def list_users(self):
        return [
            {
                "user_id": u.user_id,
                "username": u.username,
                "full_name": u.full_name,
                "role": u.role.value,
                "employee_id": u.employee_id,
                "is_active": u.is_active,
            }
            for u in self._users.list_all()
        ]

    def set_active(self, *, current_role: Role, current_user_id: int, user_id: int, is_active: bool) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tienes permisos")
        if int(user_id) == int(current_user_id) and not is_active:
            raise ValidationError("No puedes desactivar tu propia cuenta")
        if not self._users.set_active(int(user_id), is_active=bool(is_active)):
            raise NotFoundError("Usuario no encontrado")

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("No tienes permisos")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Usuario no encontrado")
        if user.role == Role.ADMIN:
            raise ValidationError("No se puede eliminar una cuenta de administrador")

        if not self._users.delete_by_id(int(user_id)):
            raise ValidationError("No se pudo eliminar el usuario")
