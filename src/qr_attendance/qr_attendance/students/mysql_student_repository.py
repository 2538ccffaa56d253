from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateControlNumberError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "numero_control, nombre, grupo, semestre, created_at"


def _to_student(r: dict) -> Student:
    return Student(
        control_number=r["numero_control"],
        name=r["nombre"],
        group=r["grupo"],
        semester=int(r["semestre"]),
        created_at=r.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_control_number(self, *, tenant_key: str, control_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE tenant_key=%s AND numero_control=%s",
                (tenant_key, control_number),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def create_student(
        self,
        *,
        tenant_key: str,
        control_number: str,
        name: str,
        group: str,
        semester: int,
    ) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO students(tenant_key, numero_control, nombre, grupo, semestre)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (tenant_key, control_number, name, group, int(semester)),
                )
            except IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise DuplicateControlNumberError(control_number) from e
                raise

            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(cur.lastrowid),))
            return _to_student(fetchone(cur))

    def list_students(self, *, tenant_key: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE tenant_key=%s ORDER BY created_at ASC",
                (tenant_key,),
            )
            return [_to_student(r) for r in fetchall(cur)]
