from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. ``employee_id`` links it to an employee record (None for pure admins)."""

    user_id: int
    username: str
    password_hash: str
    full_name: str
    role: Role
    employee_id: Optional[int] = None
    is_active: bool = True
