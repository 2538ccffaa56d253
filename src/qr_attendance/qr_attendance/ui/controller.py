from __future__ import annotations

from flask import Flask, g, jsonify, redirect, url_for

from ..container import Container
from ..core.enums import View
from . import messages as m


def register(app: Flask, container: Container) -> None:
    @app.context_processor
    def inject_shell():
        shell = getattr(g, "shell", None)
        if shell is None:
            return {"toast": None, "shell_state": None}
        return {"toast": shell.current_toast(), "shell_state": shell.state}

    @app.route("/view/<name>", methods=["POST"], endpoint="switch_view")
    def switch_view(name: str):
        try:
            view = View(name)
        except ValueError:
            return redirect(url_for("index"))

        g.shell.dispatch(m.SwitchView(view))
        return redirect(url_for("report" if view == View.REPORT else "index"))

    @app.route("/api/toast/dismiss", methods=["POST"], endpoint="dismiss_toast")
    def dismiss_toast():
        g.shell.dispatch(m.DismissToast())
        return jsonify({"success": True})
