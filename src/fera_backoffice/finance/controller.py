from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import arg_date, arg_list, capability_required, csv_response, current_session, json_body
from ..container import Container
from ..core.enums import Capability
from ..core.exceptions import ValidationError
from ..filters.predicate import DateRange, apply_filter, build_predicate
from ..reports.csv_export import export_finance


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    def _predicate():
        return build_predicate(
            request.args.get("search", ""),
            arg_list("categories"),
            DateRange.of(arg_date("start"), arg_date("end")),
            text_field="reference",
            category_field="category",
            date_field="date",
        )

    @app.route("/api/finance", methods=["GET"], endpoint="finance_list")
    @capability_required(Capability.FINANCE)
    def finance_list():
        snapshot = _workspace().runner.snapshot
        predicate = _predicate()
        cash_in = apply_filter(snapshot.cash_in, predicate)
        cash_out = apply_filter(snapshot.cash_out, predicate)
        return jsonify(
            {
                "success": True,
                "cashIn": [c.to_row() for c in cash_in],
                "cashOut": [c.to_row() for c in cash_out],
                "balance": _workspace().finance.balance(arg_date("start"), arg_date("end")),
            }
        )

    @app.route("/api/finance/<ledger>", methods=["POST"], endpoint="finance_record")
    @capability_required(Capability.FINANCE)
    def finance_record(ledger: str):
        data = json_body()
        service = _workspace().finance
        args = (data.get("value"), data.get("category") or "", data.get("reference") or "", data.get("date"))
        if ledger == "in":
            entry = service.record_cash_in(*args)
        elif ledger == "out":
            entry = service.record_cash_out(*args)
        else:
            raise ValidationError("Tipo de lançamento inválido")
        return jsonify({"success": True, "entry": entry.to_row()})

    @app.route("/api/finance/<ledger>/<entry_id>", methods=["DELETE"], endpoint="finance_delete")
    @capability_required(Capability.FINANCE)
    def finance_delete(ledger: str, entry_id: str):
        _workspace().finance.delete_entry(ledger, entry_id)
        return jsonify({"success": True})

    @app.route("/api/finance/report.csv", methods=["GET"], endpoint="finance_report_csv")
    @capability_required(Capability.FINANCE)
    def finance_report_csv():
        snapshot = _workspace().runner.snapshot
        predicate = _predicate()
        return csv_response(app, export_finance(apply_filter(snapshot.cash_in, predicate), apply_filter(snapshot.cash_out, predicate)))
