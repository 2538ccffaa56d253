from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} es obligatorio")
    return str(value).strip()


def require_int_in_range(value, field_name: str, low: int, high: int) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} debe ser un número entero") from None
    if number < low or number > high:
        raise ValidationError(f"{field_name} debe estar entre {low} y {high}")
    return number


def require_choice(value: str, field_name: str, choices: Iterable[str]) -> str:
    value = require_non_empty(value, field_name)
    if value not in tuple(choices):
        raise ValidationError(f"{field_name} no es válida")
    return value
