from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..access.permissions import visible_sections
from ..common.web import SESSION_KEY, current_session, json_body, login_required
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    def _profile(auth):
        return {
            "userId": auth.user_id,
            "name": auth.name,
            "email": auth.email,
            "role": auth.role.value,
            "companyId": auth.company_id,
            "sections": ["dashboard", *sorted(c.value for c in visible_sections(auth.role, auth.permissions))],
        }

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body() or request.form
        email = (data.get("email") or "").strip()
        password = data.get("password") or ""
        if not email or not password:
            raise AuthenticationError("Informe e-mail e senha")

        auth = container.auth_provider.sign_in(email, password)
        session.permanent = bool(data.get("remember"))
        app.permanent_session_lifetime = timedelta(days=7)
        session[SESSION_KEY] = auth.to_dict()
        return jsonify({"success": True, "user": _profile(auth)})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        auth = current_session()
        if auth is not None:
            container.workspaces.close(auth.user_id)
            container.auth_provider.sign_out(auth)
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": _profile(current_session())})

    @app.route("/api/sync-status", methods=["GET"], endpoint="sync_status")
    @login_required
    def sync_status():
        workspace = container.workspaces.get(current_session())
        return jsonify(
            {
                "success": True,
                "loading": workspace.runner.loading,
                "stale": workspace.runner.stale,
                "notifications": [{"level": level, "message": msg} for level, msg in workspace.notifier.messages],
            }
        )
