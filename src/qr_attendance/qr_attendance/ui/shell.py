"""Per-tenant UI state driven through a single dispatch point.

The Flask views are thin: they run the use case, then tell the shell what
happened with a message object. The shell owns the visible state (active
view, loading flag, last QR, report rows, one toast) and the report view's
live student-name subscription.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional

from ..common.datetime_utils import now_local
from ..core.constants import CLASS_TIMES, DEFAULT_SHELL_IDLE_SECONDS, DEFAULT_TOAST_SECONDS
from ..core.enums import ToastLevel, View
from ..core.exceptions import StorageFailure
from ..identity.model import Tenant
from ..students.model import Student
from ..students.name_index import StudentNameIndex
from ..students.service import SnapshotCallback, Subscription
from . import messages as m

logger = logging.getLogger(__name__)

Subscribe = Callable[[SnapshotCallback], Subscription]


@dataclass(frozen=True)
class Toast:
    text: str
    level: ToastLevel
    shown_at: datetime

    def expired(self, now: datetime, seconds: int) -> bool:
        return now - self.shown_at >= timedelta(seconds=seconds)


@dataclass
class ShellState:
    view: View = View.REGISTER
    loading: bool = False
    qr_token: Optional[str] = None
    last_student: Optional[Student] = None
    subject: str = ""
    class_time: str = CLASS_TIMES[0]
    rows: tuple = ()
    generation: int = 0
    applied_generation: int = 0
    toast: Optional[Toast] = None


class Shell:
    def __init__(
        self,
        *,
        subscribe: Subscribe,
        toast_seconds: int = DEFAULT_TOAST_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self.state = ShellState()
        self.name_index = StudentNameIndex()
        self._subscribe = subscribe
        self._subscription: Optional[Subscription] = None
        self._toast_seconds = int(toast_seconds)
        self._clock = clock
        self._lock = threading.RLock()
        self._handlers = {
            m.SwitchView: self._on_switch_view,
            m.Submitting: self._on_submitting,
            m.Settled: self._on_settled,
            m.StudentRegistered: self._on_student_registered,
            m.RegistrationFailed: self._on_registration_failed,
            m.ScanRecorded: self._on_scan_recorded,
            m.ScanFailed: self._on_scan_failed,
            m.FilterChanged: self._on_filter_changed,
            m.ReportLoaded: self._on_report_loaded,
            m.ReportFailed: self._on_report_failed,
            m.DismissToast: self._on_dismiss_toast,
        }

    def dispatch(self, message):
        handler = self._handlers.get(type(message))
        if handler is None:
            raise TypeError(f"Unsupported message: {type(message).__name__}")
        with self._lock:
            return handler(message)

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def current_toast(self) -> Optional[Toast]:
        with self._lock:
            toast = self.state.toast
            if toast and toast.expired(self._clock(), self._toast_seconds):
                self.state.toast = None
            return self.state.toast

    @contextmanager
    def submitting(self) -> Iterator["Shell"]:
        """Show the loading state for the duration of one user action."""

        self.dispatch(m.Submitting())
        try:
            yield self
        finally:
            self.dispatch(m.Settled())

    def close(self) -> None:
        with self._lock:
            self._release_subscription()

    # handlers

    def _on_switch_view(self, msg: m.SwitchView) -> None:
        if msg.view == self.state.view and (msg.view != View.REPORT or self.subscribed):
            return

        self.state.view = msg.view
        if msg.view == View.REPORT:
            try:
                self._subscription = self._subscribe(self.name_index.replace)
            except StorageFailure as e:
                logger.warning("Suscripción a alumnos fallida: %s", e)
                self._toast("No se pudo cargar la lista de alumnos", ToastLevel.DANGER)
        else:
            self._release_subscription()

    def _on_submitting(self, msg: m.Submitting) -> None:
        self.state.loading = True

    def _on_settled(self, msg: m.Settled) -> None:
        self.state.loading = False

    def _on_student_registered(self, msg: m.StudentRegistered) -> None:
        self.state.loading = False
        self.state.qr_token = msg.result.qr_token
        self.state.last_student = msg.result.student
        self._toast("Alumno registrado correctamente", ToastLevel.SUCCESS)

    def _on_registration_failed(self, msg: m.RegistrationFailed) -> None:
        self.state.loading = False
        self._toast(msg.error, ToastLevel.WARNING)

    def _on_scan_recorded(self, msg: m.ScanRecorded) -> None:
        self.state.loading = False
        self._toast("Asistencia registrada", ToastLevel.SUCCESS)

    def _on_scan_failed(self, msg: m.ScanFailed) -> None:
        self.state.loading = False
        self._toast(msg.error, ToastLevel.WARNING)

    def _on_filter_changed(self, msg: m.FilterChanged) -> int:
        self.state.subject = msg.subject
        self.state.class_time = msg.class_time
        self.state.generation += 1
        self.state.loading = True
        return self.state.generation

    def _on_report_loaded(self, msg: m.ReportLoaded) -> bool:
        if msg.ticket != self.state.generation:
            logger.debug("Reporte %s descartado (actual %s)", msg.ticket, self.state.generation)
            return False
        self.state.rows = tuple(msg.rows)
        self.state.applied_generation = msg.ticket
        self.state.loading = False
        return True

    def _on_report_failed(self, msg: m.ReportFailed) -> bool:
        if msg.ticket != self.state.generation:
            return False
        self.state.loading = False
        self._toast(msg.error, ToastLevel.DANGER)
        return True

    def _on_dismiss_toast(self, msg: m.DismissToast) -> None:
        self.state.toast = None

    def _toast(self, text: str, level: ToastLevel) -> None:
        # One active message: a new toast replaces the previous one.
        self.state.toast = Toast(text=text, level=level, shown_at=self._clock())

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None


class ShellRegistry:
    """Thread-safe map tenant key -> Shell.

    A shell not looked up for ``idle_seconds`` is evicted and closed, which
    also drops its student-name subscription.
    """

    def __init__(
        self,
        factory: Callable[[Tenant], Shell],
        *,
        idle_seconds: int = DEFAULT_SHELL_IDLE_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._factory = factory
        self._idle = timedelta(seconds=int(idle_seconds))
        self._clock = clock
        self._shells: dict[str, Shell] = {}
        self._last_seen: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def get(self, tenant: Tenant) -> Shell:
        now = self._clock()
        with self._lock:
            idle = self._take_idle(now)
            shell = self._shells.get(tenant.key)
            if shell is None:
                shell = self._factory(tenant)
                self._shells[tenant.key] = shell
            self._last_seen[tenant.key] = now

        for stale in idle:
            stale.close()
        return shell

    def __len__(self) -> int:
        with self._lock:
            return len(self._shells)

    def _take_idle(self, now: datetime) -> list[Shell]:
        expired = [key for key, seen in self._last_seen.items() if now - seen >= self._idle]
        if expired:
            logger.debug("Cerrando %d shells inactivos", len(expired))
        idle = []
        for key in expired:
            del self._last_seen[key]
            idle.append(self._shells.pop(key))
        return idle
