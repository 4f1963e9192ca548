from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import capability_required, current_session, json_body
from ..container import Container
from ..core.enums import Capability
from ..core.exceptions import ValidationError
from .service import ChatMessage


def register(app: Flask, container: Container) -> None:
    @app.route("/api/assistant", methods=["POST"], endpoint="assistant_ask")
    @capability_required(Capability.AI)
    def assistant_ask():
        raw = json_body().get("messages") or []
        if not isinstance(raw, list):
            raise ValidationError("Histórico inválido")
        history = [ChatMessage(role=str(m.get("role") or "user"), text=str(m.get("text") or "")) for m in raw]

        workspace = container.workspaces.get(current_session())
        reply = container.assistant_service.ask(history, workspace.runner.snapshot)
        return jsonify({"success": True, "reply": reply})
