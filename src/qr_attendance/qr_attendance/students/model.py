from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Entidad de dominio: alumno inscrito."""

    control_number: str
    name: str
    group: str
    semester: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RegistrationResult:
    """Alumno guardado junto con el QR generado para mostrarlo de inmediato."""

    student: Student
    qr_token: str
