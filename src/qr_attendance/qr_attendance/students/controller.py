from __future__ import annotations

import io

from flask import Flask, g, redirect, render_template, request, send_file, url_for

from ..container import Container
from ..core.constants import CLASS_TIMES, SEMESTERS
from ..core.enums import View
from ..core.exceptions import MalformedPayloadError, StorageFailure, ValidationError
from ..qr.payload import decode as decode_qr
from ..qr.render import render_png
from ..ui import messages as m


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        g.shell.dispatch(m.SwitchView(View.REGISTER))
        return render_template(
            "register.html",
            class_times=CLASS_TIMES,
            semesters=SEMESTERS,
            form={},
            active_page="register",
        )

    @app.route("/students", methods=["POST"], endpoint="register_student")
    def register_student():
        form = request.form
        with g.shell.submitting() as shell:
            try:
                result = container.student_registry.register_student(
                    g.tenant,
                    name=form.get("nombre", ""),
                    group=form.get("grupo", ""),
                    semester=form.get("semestre", ""),
                    subject=form.get("materia", ""),
                    class_time=form.get("hora", ""),
                    control_number=form.get("numero_control", ""),
                )
            except ValidationError as e:
                shell.dispatch(m.RegistrationFailed(str(e)))
            except StorageFailure:
                shell.dispatch(m.RegistrationFailed("Error al registrar al alumno, intenta de nuevo"))
                return redirect(url_for("index"))
            else:
                shell.dispatch(m.StudentRegistered(result))
                return redirect(url_for("index"))

        return (
            render_template(
                "register.html",
                class_times=CLASS_TIMES,
                semesters=SEMESTERS,
                form=form,
                active_page="register",
            ),
            400,
        )

    @app.route("/qr.png", methods=["GET"], endpoint="qr_png")
    def qr_png():
        token = request.args.get("token") or g.shell.state.qr_token
        try:
            payload = decode_qr(token or "")
        except MalformedPayloadError as e:
            return str(e), 404
        return send_file(io.BytesIO(render_png(payload)), mimetype="image/png")
