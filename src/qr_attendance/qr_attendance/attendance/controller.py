from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from flask import Flask, g, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import format_checkin
from ..container import Container
from ..core.constants import CLASS_TIMES
from ..core.enums import View
from ..core.exceptions import StorageFailure, ValidationError
from ..ui import messages as m
from .model import AttendanceReportRow

_REPORT_ERROR = "Error al cargar el reporte"


@dataclass(frozen=True)
class ReportFetch:
    ticket: int
    applied: bool
    rows: Optional[Sequence[AttendanceReportRow]] = None
    error: Optional[str] = None


def _row_to_dict(row: AttendanceReportRow) -> dict:
    return {
        "numero_control": row.control_number,
        "nombre": row.name,
        "hora_entrada": format_checkin(row.checkin_time),
    }


def register(app: Flask, container: Container) -> None:
    def _refresh_report(subject: str, class_time: str) -> ReportFetch:
        """Run one report fetch under a fresh generation ticket.

        ``applied`` is False when a newer filter change superseded this fetch
        before it finished; the shell then keeps the newer result.
        """

        shell = g.shell
        shell.dispatch(m.SwitchView(View.REPORT))
        ticket = shell.dispatch(m.FilterChanged(subject=subject, class_time=class_time))
        try:
            rows = container.report_service.build_report(
                g.tenant,
                subject=subject,
                class_time=class_time,
                name_index=shell.name_index,
            )
        except ValidationError as e:
            error = str(e)
        except StorageFailure:
            error = _REPORT_ERROR
        except Exception:
            shell.dispatch(m.ReportFailed(ticket, _REPORT_ERROR))
            raise
        else:
            return ReportFetch(ticket, shell.dispatch(m.ReportLoaded(ticket, rows)), rows=rows)
        return ReportFetch(ticket, shell.dispatch(m.ReportFailed(ticket, error)), error=error)

    @app.route("/scan", methods=["POST"], endpoint="simulate_scan")
    def simulate_scan():
        with g.shell.submitting() as shell:
            token = request.form.get("token") or shell.state.qr_token
            try:
                event = container.attendance_log.simulate_scan(g.tenant, token)
            except ValidationError as e:
                shell.dispatch(m.ScanFailed(str(e)))
            except StorageFailure:
                shell.dispatch(m.ScanFailed("Error al registrar la asistencia"))
            else:
                shell.dispatch(m.ScanRecorded(event))
        return redirect(url_for("index"))

    @app.route("/report", methods=["GET"], endpoint="report")
    def report():
        shell = g.shell
        subject = (request.args.get("materia") or shell.state.subject or "").strip()
        class_time = request.args.get("hora") or shell.state.class_time

        rows: Sequence[AttendanceReportRow] = ()
        if subject:
            fetch = _refresh_report(subject, class_time)
            rows = fetch.rows or ()
        else:
            shell.dispatch(m.SwitchView(View.REPORT))

        return render_template(
            "report.html",
            class_times=CLASS_TIMES,
            subject=subject,
            class_time=class_time,
            rows=[_row_to_dict(r) for r in rows],
            active_page="report",
        )

    @app.route("/api/report", methods=["GET"], endpoint="api_report")
    def api_report():
        fetch = _refresh_report((request.args.get("materia") or "").strip(), request.args.get("hora") or "")

        if not fetch.applied:
            return jsonify({"success": False, "stale": True, "generation": fetch.ticket}), 409
        if fetch.error is not None:
            return jsonify({"success": False, "generation": fetch.ticket, "message": fetch.error}), 400

        return jsonify(
            {
                "success": True,
                "generation": fetch.ticket,
                "rows": [_row_to_dict(r) for r in fetch.rows],
            }
        )
