from __future__ import annotations

from enum import Enum


class View(str, Enum):
    """Vistas disponibles en la interfaz."""

    REGISTER = "register"
    REPORT = "report"


class ToastLevel(str, Enum):
    """Nivel visual del mensaje transitorio."""

    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
