from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceEvent:
    """Entidad de dominio: un escaneo registrado (append-only)."""

    control_number: str
    subject: str
    class_time: str
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model del reporte: primera entrada de cada alumno."""

    control_number: str
    name: str
    checkin_time: Optional[datetime]
