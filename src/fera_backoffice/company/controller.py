from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import capability_required, current_session, json_body
from ..container import Container
from ..core.enums import Capability


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @capability_required(Capability.SETTINGS)
    def settings_get():
        workspace = _workspace()
        return jsonify(
            {
                "success": True,
                "settings": workspace.company.config().to_row(),
                "monthlyGoals": [g.to_row(workspace.runner.company_id or "") for g in workspace.runner.snapshot.monthly_goals],
            }
        )

    @app.route("/api/settings/rates", methods=["PUT"], endpoint="settings_rates")
    @capability_required(Capability.SETTINGS)
    def settings_rates():
        config = _workspace().company.update_service_rates(json_body().get("serviceRates") or {})
        return jsonify({"success": True, "settings": config.to_row()})

    @app.route("/api/settings/categories", methods=["PUT"], endpoint="settings_categories")
    @capability_required(Capability.SETTINGS)
    def settings_categories():
        data = json_body()
        config = _workspace().company.update_categories(
            finance=data.get("financeCategories"),
            inventory=data.get("inventoryCategories"),
        )
        return jsonify({"success": True, "settings": config.to_row()})

    @app.route("/api/goals/<period>", methods=["PUT"], endpoint="goals_set")
    @capability_required(Capability.SETTINGS)
    def goals_set(period: str):
        data = json_body()
        goal = _workspace().company.set_monthly_goal(period, data.get("production"), data.get("revenue", 0))
        return jsonify({"success": True, "goal": goal.to_row(_workspace().runner.company_id or "")})
