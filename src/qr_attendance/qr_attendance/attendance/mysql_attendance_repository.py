from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent
from .repository import AttendanceRepository

_COLUMNS = "numero_control, materia, hora_clase, timestamp"


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        control_number=r["numero_control"],
        subject=r["materia"],
        class_time=r["hora_clase"],
        timestamp=r.get("timestamp"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_event(
        self,
        *,
        tenant_key: str,
        control_number: str,
        subject: str,
        class_time: str,
    ) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(tenant_key, numero_control, materia, hora_clase)
                VALUES(%s,%s,%s,%s)
                """,
                (tenant_key, control_number, subject, class_time),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s",
                (int(cur.lastrowid),),
            )
            return _to_event(fetchone(cur))

    def find_events(self, *, tenant_key: str, subject: str, class_time: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE tenant_key=%s AND materia=%s AND hora_clase=%s
                """,
                (tenant_key, subject, class_time),
            )
            return [_to_event(r) for r in fetchall(cur)]
