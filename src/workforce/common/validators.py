from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} es obligatorio")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} debe tener al menos {min_len} caracteres")
    return value


def require_positive(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} no es un número válido")
    if number <= 0:
        raise ValidationError(f"{field_name} debe ser mayor que cero")
    return number


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip() if isinstance(value, str) else value
    return v or None


def parse_enum(enum_cls: Type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    raw = str(value or "").strip()
    for candidate in (raw, raw.upper(), raw.lower()):
        try:
            return enum_cls(candidate)
        except ValueError:
            continue
    raise ValidationError(f"{field_name} no válido: {value}")


def normalize_dni(value: Optional[str]) -> str:
    """Spanish DNI/NIE/NIF: trimmed, upper-cased, without spaces or dashes."""
    raw = require_non_empty(value, "DNI")
    return raw.replace(" ", "").replace("-", "").upper()
