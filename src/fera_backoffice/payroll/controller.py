from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import today_local
from ..common.web import arg_date, capability_required, current_session, json_body
from ..container import Container
from ..core.constants import DEFAULT_SETTLEMENT_CATEGORY
from ..core.enums import Capability
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    def _range():
        today = today_local()
        start = arg_date("start", today.replace(day=1))
        end = arg_date("end", today)
        if start > end:
            raise ValidationError("Período inválido")
        return start, end

    @app.route("/api/payroll/<employee_id>/preview", methods=["GET"], endpoint="payroll_preview")
    @capability_required(Capability.ANALYTICS)
    def payroll_preview(employee_id: str):
        start, end = _range()
        settlement = _workspace().payroll.preview(employee_id, start, end)
        return jsonify({"success": True, "settlement": settlement.as_dict(), "recordIds": list(settlement.record_ids)})

    @app.route("/api/payroll/<employee_id>/settle", methods=["POST"], endpoint="payroll_settle")
    @capability_required(Capability.ANALYTICS)
    def payroll_settle(employee_id: str):
        data = json_body()
        start, end = _range()
        outcome = _workspace().payroll.settle_range(
            employee_id,
            start,
            end,
            reference=(data.get("reference") or "").strip(),
            category=(data.get("category") or "").strip() or DEFAULT_SETTLEMENT_CATEGORY,
        )
        return jsonify(
            {
                "success": True,
                "cashOut": outcome.cash_out_entry.to_row(),
                "updatedRecords": [r.to_row() for r in outcome.updated_records],
                "settlement": outcome.settlement.as_dict(),
                "informational": outcome.informational,
            }
        )
