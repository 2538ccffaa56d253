from __future__ import annotations

import pytest

from src.qr_attendance.qr_attendance.attendance.report import ReportService
from src.qr_attendance.qr_attendance.attendance.service import AttendanceLog
from src.qr_attendance.qr_attendance.core.exceptions import MalformedPayloadError, StorageFailure, ValidationError
from src.qr_attendance.qr_attendance.qr.payload import encode
from src.qr_attendance.qr_attendance.students.name_index import StudentNameIndex
from src.qr_attendance.qr_attendance.students.service import StudentRegistry

from tests.fakes import BrokenStore, InMemoryAttendance, InMemoryStudents


def test_every_checkin_is_appended(tenant):
    repo = InMemoryAttendance()
    log = AttendanceLog(repo)

    first = log.record_check_in(tenant, control_number="101", subject="Física", class_time="08:00")
    second = log.record_check_in(tenant, control_number="101", subject="Física", class_time="08:00")

    assert len(repo.rows) == 2
    assert first.timestamp < second.timestamp


def test_checkin_for_unregistered_student_is_allowed(tenant):
    event = AttendanceLog(InMemoryAttendance()).record_check_in(
        tenant, control_number="nadie", subject="Física", class_time="08:00"
    )
    assert event.control_number == "nadie"


def test_query_by_filter_uses_equality_on_both_fields(tenant):
    log = AttendanceLog(InMemoryAttendance())
    log.record_check_in(tenant, control_number="1", subject="Física", class_time="08:00")
    log.record_check_in(tenant, control_number="2", subject="Física", class_time="09:00")
    log.record_check_in(tenant, control_number="3", subject="Química", class_time="08:00")

    events = log.query_by_filter(tenant, subject="Física", class_time="08:00")

    assert [e.control_number for e in events] == ["1"]


def test_query_requires_subject(tenant):
    with pytest.raises(ValidationError):
        AttendanceLog(InMemoryAttendance()).query_by_filter(tenant, subject=" ", class_time="08:00")


def test_simulated_scan_records_payload_fields(tenant):
    repo = InMemoryAttendance()
    event = AttendanceLog(repo).simulate_scan(tenant, encode("101", "Física", "08:00"))

    assert (event.control_number, event.subject, event.class_time) == ("101", "Física", "08:00")
    assert repo.rows == [(tenant.key, event)]


def test_scan_without_generated_qr_is_malformed(tenant):
    repo = InMemoryAttendance()
    with pytest.raises(MalformedPayloadError):
        AttendanceLog(repo).simulate_scan(tenant, None)
    assert repo.rows == []


def test_storage_failure_propagates(tenant):
    with pytest.raises(StorageFailure):
        AttendanceLog(BrokenStore()).record_check_in(tenant, control_number="1", subject="F", class_time="08:00")


def test_register_scan_report_scenario(tenant):
    registry = StudentRegistry(InMemoryStudents())
    log = AttendanceLog(InMemoryAttendance())
    index = StudentNameIndex()
    registry.listen(tenant, index.replace)

    result = registry.register_student(
        tenant,
        name="Ana López",
        group="3B",
        semester=3,
        subject="Física",
        class_time="08:00",
        control_number="101",
    )
    event = log.simulate_scan(tenant, result.qr_token)
    rows = ReportService(log).build_report(tenant, subject="Física", class_time="08:00", name_index=index)

    assert len(rows) == 1
    assert rows[0].control_number == "101"
    assert rows[0].name == "Ana López"
    assert rows[0].checkin_time == event.timestamp
