from __future__ import annotations

import threading
from typing import Iterable, Optional

from ..core.constants import UNKNOWN_STUDENT_NAME
from .model import Student


class StudentNameIndex:
    """Owned cache: control number -> student name.

    Every update replaces the whole snapshot; readers never see a partial one.
    """

    def __init__(self, students: Iterable[Student] = ()):
        self._lock = threading.Lock()
        self._names: dict[str, str] = {s.control_number: s.name for s in students}
        self.version = 0

    def replace(self, students: Iterable[Student]) -> None:
        snapshot = {s.control_number: s.name for s in students}
        with self._lock:
            self._names = snapshot
            self.version += 1

    def get(self, control_number: str) -> Optional[str]:
        return self._names.get(control_number)

    def resolve(self, control_number: str) -> str:
        return self._names.get(control_number, UNKNOWN_STUDENT_NAME)

    def __contains__(self, control_number: object) -> bool:
        return control_number in self._names

    def __len__(self) -> int:
        return len(self._names)
