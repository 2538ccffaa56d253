"""Attendance report derivation.

``derive_report`` keeps one row per control number: the earliest check-in
for the requested (subject, class time). Rows come out in first-seen order
of the time-sorted events, so the earliest arrival is listed first.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..identity.model import Tenant
from ..students.name_index import StudentNameIndex
from .model import AttendanceEvent, AttendanceReportRow
from .service import AttendanceLog

_EPOCH = datetime(1970, 1, 1)


def _sort_key(event: AttendanceEvent) -> float:
    # Missing timestamps count as time zero and sort first.
    ts: Optional[datetime] = event.timestamp
    if ts is None:
        return 0.0
    if ts.tzinfo is not None:
        return ts.timestamp()
    return (ts - _EPOCH).total_seconds()


def derive_report(
    subject: str,
    class_time: str,
    events: Iterable[AttendanceEvent],
    name_index: StudentNameIndex,
) -> list[AttendanceReportRow]:
    ordered = sorted(
        (e for e in events if e.subject == subject and e.class_time == class_time),
        key=_sort_key,
    )

    rows: list[AttendanceReportRow] = []
    seen: set[str] = set()
    for event in ordered:
        if event.control_number in seen:
            continue
        seen.add(event.control_number)
        rows.append(
            AttendanceReportRow(
                control_number=event.control_number,
                name=name_index.resolve(event.control_number),
                checkin_time=event.timestamp,
            )
        )
    return rows


class ReportService:
    """Use case: fetch the filtered events and reduce them to report rows."""

    def __init__(self, log: AttendanceLog):
        self._log = log

    def build_report(
        self,
        tenant: Tenant,
        *,
        subject: str,
        class_time: str,
        name_index: StudentNameIndex,
    ) -> Sequence[AttendanceReportRow]:
        subject = require_non_empty(subject, "Materia")
        class_time = require_non_empty(class_time, "Hora de clase")
        events = self._log.query_by_filter(tenant, subject=subject, class_time=class_time)
        return derive_report(subject, class_time, events, name_index)
