from __future__ import annotations

import logging
import threading
from typing import Callable, Sequence

from ..common.validators import require_choice, require_int_in_range, require_non_empty
from ..core.constants import CLASS_TIMES, DEFAULT_QR_IMAGE_SIZE, DEFAULT_QR_SERVICE_URL, MAX_SEMESTER, MIN_SEMESTER
from ..core.exceptions import DuplicateControlNumberError, StorageFailure
from ..identity.model import Tenant
from ..qr import payload as qr_payload
from .model import RegistrationResult, Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Sequence[Student]], None]


class Subscription:
    """Handle for a live student listing; ``close()`` stops further pushes."""

    def __init__(self, release: Callable[[], None]):
        self._release = release
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def close(self) -> None:
        if self._active:
            self._active = False
            self._release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class StudentRegistry:
    """Use case: enrol students (create-only) and publish the live listing."""

    def __init__(
        self,
        students: StudentRepository,
        *,
        qr_service_url: str = DEFAULT_QR_SERVICE_URL,
        qr_image_size: str = DEFAULT_QR_IMAGE_SIZE,
    ):
        self._students = students
        self._qr_service_url = qr_service_url
        self._qr_image_size = qr_image_size
        self._lock = threading.Lock()
        self._listeners: dict[str, list[SnapshotCallback]] = {}
        self._revisions: dict[str, int] = {}

    def register_student(
        self,
        tenant: Tenant,
        *,
        name: str,
        group: str,
        semester,
        subject: str,
        class_time: str,
        control_number: str,
    ) -> RegistrationResult:
        name = require_non_empty(name, "Nombre")
        group = require_non_empty(group, "Grupo")
        semester = require_int_in_range(semester, "Semestre", MIN_SEMESTER, MAX_SEMESTER)
        subject = require_non_empty(subject, "Materia")
        class_time = require_choice(class_time, "Hora de clase", CLASS_TIMES)
        control_number = require_non_empty(control_number, "Número de control")

        if self._students.get_by_control_number(tenant_key=tenant.key, control_number=control_number):
            raise DuplicateControlNumberError(control_number)

        # The unique key on (tenant_key, numero_control) catches a concurrent insert.
        student = self._students.create_student(
            tenant_key=tenant.key,
            control_number=control_number,
            name=name,
            group=group,
            semester=semester,
        )
        logger.info("Alumno %s registrado en %s", control_number, tenant.key)

        self._publish(tenant)

        token = qr_payload.encode(
            control_number,
            subject,
            class_time,
            service_url=self._qr_service_url,
            size=self._qr_image_size,
        )
        return RegistrationResult(student=student, qr_token=token)

    def list_students(self, tenant: Tenant) -> Sequence[Student]:
        return self._students.list_students(tenant_key=tenant.key)

    def listen(self, tenant: Tenant, callback: SnapshotCallback) -> Subscription:
        """Push the full student snapshot now and after every registration."""

        with self._lock:
            self._listeners.setdefault(tenant.key, []).append(callback)

        def release() -> None:
            with self._lock:
                callbacks = self._listeners.get(tenant.key, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._listeners.pop(tenant.key, None)
                    self._revisions.pop(tenant.key, None)

        subscription = Subscription(release)
        try:
            self._push_initial(tenant, callback)
        except Exception:
            subscription.close()
            raise
        return subscription

    def _push_initial(self, tenant: Tenant, callback: SnapshotCallback) -> None:
        # A registration committed while listing bumps the revision; list again
        # so the first snapshot never misses it.
        while True:
            with self._lock:
                revision = self._revisions.get(tenant.key, 0)
            snapshot = self.list_students(tenant)
            with self._lock:
                if self._revisions.get(tenant.key, 0) == revision:
                    break
        callback(snapshot)

    def listener_count(self, tenant: Tenant) -> int:
        with self._lock:
            return len(self._listeners.get(tenant.key, []))

    def _publish(self, tenant: Tenant) -> None:
        with self._lock:
            callbacks = list(self._listeners.get(tenant.key, []))
            if callbacks:
                self._revisions[tenant.key] = self._revisions.get(tenant.key, 0) + 1
        if not callbacks:
            return

        try:
            snapshot = self.list_students(tenant)
        except StorageFailure:
            logger.exception("No se pudo refrescar la lista de alumnos de %s", tenant.key)
            return

        for callback in callbacks:
            callback(snapshot)
