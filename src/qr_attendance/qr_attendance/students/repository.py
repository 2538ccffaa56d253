from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_control_number(self, *, tenant_key: str, control_number: str) -> Optional[Student]:
        raise NotImplementedError

    def create_student(
        self,
        *,
        tenant_key: str,
        control_number: str,
        name: str,
        group: str,
        semester: int,
    ) -> Student:
        """Insert and return the stored row (server-assigned ``created_at``).

        Must raise ``DuplicateControlNumberError`` when the storage uniqueness
        constraint on ``(tenant_key, control_number)`` rejects the insert.
        """

        raise NotImplementedError

    def list_students(self, *, tenant_key: str) -> Sequence[Student]:
        raise NotImplementedError
