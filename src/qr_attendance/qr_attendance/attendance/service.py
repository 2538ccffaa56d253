from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..identity.model import Tenant
from ..qr import payload as qr_payload
from .model import AttendanceEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLog:
    """Use case: append check-ins and query them by (subject, class time).

    No dedup and no check that the student exists; the report handles both.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def record_check_in(self, tenant: Tenant, *, control_number: str, subject: str, class_time: str) -> AttendanceEvent:
        event = self._attendance.create_event(
            tenant_key=tenant.key,
            control_number=control_number,
            subject=subject,
            class_time=class_time,
        )
        logger.info("Asistencia registrada: %s %s %s", control_number, subject, class_time)
        return event

    def simulate_scan(self, tenant: Tenant, token: str | None) -> AttendanceEvent:
        payload = qr_payload.decode(token or "")
        return self.record_check_in(
            tenant,
            control_number=payload.control_number,
            subject=payload.subject,
            class_time=payload.class_time,
        )

    def query_by_filter(self, tenant: Tenant, *, subject: str, class_time: str) -> Sequence[AttendanceEvent]:
        subject = require_non_empty(subject, "Materia")
        class_time = require_non_empty(class_time, "Hora de clase")
        return self._attendance.find_events(tenant_key=tenant.key, subject=subject, class_time=class_time)
