from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import period_of, today_local
from ..common.web import arg_date, arg_list, capability_required, csv_response, current_session, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_SERIES_MONTHS
from ..core.enums import Capability
from ..core.exceptions import ValidationError
from ..filters.predicate import DateRange, apply_filter, area_status_filter, build_predicate
from ..reports.csv_export import export_production
from . import aggregator


def _area_json(area) -> dict:
    return {**area.to_row(), "services": [s.to_row(area.company_id) for s in area.services]}


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    def _filtered_areas():
        snapshot = _workspace().runner.snapshot
        predicate = build_predicate(
            request.args.get("search", ""),
            arg_list("responsible"),
            DateRange.of(arg_date("start"), arg_date("end")),
            text_field="name",
            category_field="responsible_employee_id",
            date_field="start_date",
        )
        areas = apply_filter(snapshot.areas, predicate)
        return apply_filter(areas, area_status_filter(request.args.get("status", "all")))

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        totals = aggregator.dashboard_totals(_workspace().runner.snapshot, today_local())
        return jsonify(
            {
                "success": True,
                "metrics": dict(totals.values),
                "lowStockItems": list(totals.low_stock_items),
                "unavailable": list(totals.unavailable),
            }
        )

    @app.route("/api/areas", methods=["GET"], endpoint="areas_list")
    @capability_required(Capability.PRODUCTION)
    def areas_list():
        return jsonify({"success": True, "areas": [_area_json(a) for a in _filtered_areas()]})

    @app.route("/api/areas", methods=["POST"], endpoint="areas_create")
    @capability_required(Capability.PRODUCTION)
    def areas_create():
        area = _workspace().production.create_area(json_body())
        return jsonify({"success": True, "area": _area_json(area)})

    @app.route("/api/areas/<area_id>/services", methods=["POST"], endpoint="areas_add_service")
    @capability_required(Capability.PRODUCTION)
    def areas_add_service(area_id: str):
        data = json_body()
        service = _workspace().production.add_service(area_id, data.get("type"), data.get("quantity"), data.get("serviceDate"))
        return jsonify({"success": True, "service": service.to_row(_workspace().runner.company_id or "")})

    @app.route("/api/areas/<area_id>/services/<service_id>", methods=["DELETE"], endpoint="areas_delete_service")
    @capability_required(Capability.PRODUCTION)
    def areas_delete_service(area_id: str, service_id: str):
        _workspace().production.delete_service(area_id, service_id)
        return jsonify({"success": True})

    @app.route("/api/areas/<area_id>/finish", methods=["POST"], endpoint="areas_finish")
    @capability_required(Capability.PRODUCTION)
    def areas_finish(area_id: str):
        data = json_body()
        area = _workspace().production.finish_area(area_id, data.get("endReference") or "", arg_date("endDate"))
        return jsonify({"success": True, "area": _area_json(area)})

    @app.route("/api/production/series", methods=["GET"], endpoint="production_series")
    @capability_required(Capability.PRODUCTION)
    def production_series():
        end_period = request.args.get("end") or period_of(today_local())
        try:
            months = int(request.args.get("months", DEFAULT_SERIES_MONTHS))
        except ValueError as exc:
            raise ValidationError("Quantidade de meses inválida") from exc

        snapshot = _workspace().runner.snapshot
        series = [
            aggregator.aggregate_month(
                bucket, snapshot.areas, snapshot.cash_in, snapshot.cash_out, snapshot.movements, snapshot.goals_by_period
            )
            for bucket in aggregator.build_monthly_series(end_period, months)
        ]
        return jsonify({"success": True, "series": [asdict(m) for m in series]})

    @app.route("/api/production/by-type", methods=["GET"], endpoint="production_by_type")
    @capability_required(Capability.PRODUCTION)
    def production_by_type():
        totals = aggregator.compute_production_totals_by_service_type(_filtered_areas())
        return jsonify({"success": True, "totals": {k.value: v for k, v in totals.items()}})

    @app.route("/api/production/report.csv", methods=["GET"], endpoint="production_report_csv")
    @capability_required(Capability.PRODUCTION)
    def production_report_csv():
        return csv_response(app, export_production(_filtered_areas()))
