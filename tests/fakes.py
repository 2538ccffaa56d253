"""In-memory repositories shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from src.qr_attendance.qr_attendance.attendance.model import AttendanceEvent
from src.qr_attendance.qr_attendance.core.exceptions import DuplicateControlNumberError, StorageFailure
from src.qr_attendance.qr_attendance.identity.model import Identity
from src.qr_attendance.qr_attendance.students.model import Student


class TickingClock:
    """Server clock stand-in: every call advances by ``step``."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        now = self._now
        self._now = now + self._step
        return now


class InMemoryIdentities:
    def __init__(self):
        self.by_uid: dict[str, Identity] = {}

    def get(self, uid: str) -> Optional[Identity]:
        return self.by_uid.get(uid)

    def create(self, uid: str) -> Identity:
        identity = self.by_uid.get(uid) or Identity(uid=uid, created_at=datetime(2026, 3, 2, 6, 0))
        self.by_uid[uid] = identity
        return identity


class InMemoryStudents:
    def __init__(self, clock=None):
        self._rows: dict[tuple[str, str], Student] = {}
        self._clock = clock or TickingClock(datetime(2026, 3, 2, 6, 30))
        self.writes = 0

    def get_by_control_number(self, *, tenant_key: str, control_number: str) -> Optional[Student]:
        return self._rows.get((tenant_key, control_number))

    def create_student(self, *, tenant_key, control_number, name, group, semester) -> Student:
        key = (tenant_key, control_number)
        if key in self._rows:
            raise DuplicateControlNumberError(control_number)
        self.writes += 1
        student = Student(
            control_number=control_number,
            name=name,
            group=group,
            semester=int(semester),
            created_at=self._clock(),
        )
        self._rows[key] = student
        return student

    def list_students(self, *, tenant_key: str):
        return [s for (t, _), s in self._rows.items() if t == tenant_key]


class InMemoryAttendance:
    def __init__(self, clock=None):
        self.rows: list[tuple[str, AttendanceEvent]] = []
        self._clock = clock or TickingClock(datetime(2026, 3, 2, 7, 0))

    def create_event(self, *, tenant_key, control_number, subject, class_time) -> AttendanceEvent:
        event = AttendanceEvent(
            control_number=control_number,
            subject=subject,
            class_time=class_time,
            timestamp=self._clock(),
        )
        self.rows.append((tenant_key, event))
        return event

    def find_events(self, *, tenant_key, subject, class_time):
        return [
            e for t, e in self.rows if t == tenant_key and e.subject == subject and e.class_time == class_time
        ]


class BrokenStore:
    """Every call fails like an unreachable database."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StorageFailure("Error al acceder a la base de datos")

        return fail
