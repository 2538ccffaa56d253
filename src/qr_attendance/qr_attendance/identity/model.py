from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Identidad anónima de una sesión de navegador."""

    uid: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Tenant:
    """Partición de datos: ``{installation_id}/{uid}``."""

    installation_id: str
    uid: str

    @property
    def key(self) -> str:
        return f"{self.installation_id}/{self.uid}"
