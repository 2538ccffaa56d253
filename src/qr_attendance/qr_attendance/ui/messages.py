"""Messages accepted by ``Shell.dispatch``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..attendance.model import AttendanceEvent, AttendanceReportRow
from ..core.enums import View
from ..students.model import RegistrationResult


@dataclass(frozen=True)
class SwitchView:
    view: View


@dataclass(frozen=True)
class Submitting:
    """A user action started; the view shows its loading indicator."""


@dataclass(frozen=True)
class StudentRegistered:
    result: RegistrationResult


@dataclass(frozen=True)
class RegistrationFailed:
    error: str


@dataclass(frozen=True)
class ScanRecorded:
    event: AttendanceEvent


@dataclass(frozen=True)
class ScanFailed:
    error: str


@dataclass(frozen=True)
class FilterChanged:
    subject: str
    class_time: str


@dataclass(frozen=True)
class ReportLoaded:
    ticket: int
    rows: Sequence[AttendanceReportRow]


@dataclass(frozen=True)
class ReportFailed:
    ticket: int
    error: str


@dataclass(frozen=True)
class DismissToast:
    pass


@dataclass(frozen=True)
class Settled:
    """The action started by ``Submitting`` is over, however it ended."""
