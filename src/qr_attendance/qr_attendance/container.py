from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.report import ReportService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLog
from .core.constants import (
    DEFAULT_QR_IMAGE_SIZE,
    DEFAULT_QR_SERVICE_URL,
    DEFAULT_SHELL_IDLE_SECONDS,
    DEFAULT_TOAST_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .identity.model import Tenant
from .identity.mysql_identity_repository import MySQLIdentityRepository
from .identity.repository import IdentityRepository
from .identity.service import IdentityBootstrap
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentRegistry
from .ui.shell import Shell, ShellRegistry


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    identities_repo: IdentityRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    identity_bootstrap: IdentityBootstrap
    student_registry: StudentRegistry
    attendance_log: AttendanceLog
    report_service: ReportService
    shells: ShellRegistry


def assemble(
    *,
    identities_repo: IdentityRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    installation_id: str,
    secret_key: str,
    qr_service_url: str = DEFAULT_QR_SERVICE_URL,
    qr_image_size: str = DEFAULT_QR_IMAGE_SIZE,
    toast_seconds: int = DEFAULT_TOAST_SECONDS,
    shell_idle_seconds: int = DEFAULT_SHELL_IDLE_SECONDS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    identity_bootstrap = IdentityBootstrap(identities_repo, installation_id=installation_id, secret_key=secret_key)
    student_registry = StudentRegistry(students_repo, qr_service_url=qr_service_url, qr_image_size=qr_image_size)
    attendance_log = AttendanceLog(attendance_repo)
    report_service = ReportService(attendance_log)

    def new_shell(tenant: Tenant) -> Shell:
        return Shell(subscribe=partial(student_registry.listen, tenant), toast_seconds=toast_seconds)

    return Container(
        conn=conn,
        identities_repo=identities_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        identity_bootstrap=identity_bootstrap,
        student_registry=student_registry,
        attendance_log=attendance_log,
        report_service=report_service,
        shells=ShellRegistry(new_shell, idle_seconds=shell_idle_seconds),
    )


def build_container(*, db_config: dict, installation_id: str, secret_key: str, **options) -> Container:
    conn = DatabaseConnection(DBConfig.from_settings(db_config))

    return assemble(
        identities_repo=MySQLIdentityRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        installation_id=installation_id,
        secret_key=secret_key,
        conn=conn,
        **options,
    )
