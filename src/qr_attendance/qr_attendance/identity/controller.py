from __future__ import annotations

from flask import Flask, g, jsonify, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import IdentityFailure

_OPEN_ENDPOINTS = {"static", "health", "auth_token_exchange"}


def register(app: Flask, container: Container) -> None:
    def _bind(identity) -> None:
        session["uid"] = identity.uid
        g.identity = identity
        g.tenant = container.identity_bootstrap.tenant_for(identity)
        g.shell = container.shells.get(g.tenant)

    def _identity_error(message: str):
        if request.path.startswith("/api/"):
            return jsonify({"success": False, "message": message}), 503
        return render_template("error.html", message=message), 503

    @app.before_request
    def bootstrap_identity():
        """Nothing touches the data store until the session identity exists."""

        if request.endpoint in _OPEN_ENDPOINTS:
            return None
        try:
            identity = container.identity_bootstrap.establish(session_uid=session.get("uid"))
        except IdentityFailure as e:
            return _identity_error(str(e))
        _bind(identity)
        return None

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/auth/token", methods=["GET"], endpoint="auth_token")
    def auth_token():
        return jsonify({"uid": g.identity.uid, "token": container.identity_bootstrap.issue_token(g.identity)})

    @app.route("/auth/token", methods=["POST"], endpoint="auth_token_exchange")
    def auth_token_exchange():
        token = (request.form.get("token") or "").strip()
        if not token:
            return _identity_error("Token de sesión inválido")

        try:
            identity = container.identity_bootstrap.establish(token=token)
        except IdentityFailure as e:
            return _identity_error(str(e))

        _bind(identity)
        return redirect(url_for("index"))
