from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def create_event(
        self,
        *,
        tenant_key: str,
        control_number: str,
        subject: str,
        class_time: str,
    ) -> AttendanceEvent:
        """Append one event; ``timestamp`` is assigned by the server."""

        raise NotImplementedError

    def find_events(self, *, tenant_key: str, subject: str, class_time: str) -> Sequence[AttendanceEvent]:
        """Equality filter on subject and class time, in storage order."""

        raise NotImplementedError
