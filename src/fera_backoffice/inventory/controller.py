from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import arg_date, arg_list, capability_required, csv_response, current_session, json_body
from ..container import Container
from ..core.enums import Capability
from ..filters.predicate import DateRange, apply_filter, build_predicate, inventory_status_filter
from ..reports.csv_export import export_inventory


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    def _filtered_items():
        snapshot = _workspace().runner.snapshot
        predicate = build_predicate(request.args.get("search", ""), arg_list("categories"), date_field=None)
        items = apply_filter(snapshot.inventory, predicate)
        return apply_filter(items, inventory_status_filter(request.args.get("status", "all")))

    @app.route("/api/inventory", methods=["GET"], endpoint="inventory_list")
    @capability_required(Capability.INVENTORY)
    def inventory_list():
        items = _filtered_items()
        return jsonify(
            {
                "success": True,
                "items": [{**i.to_row(), "critical": i.is_critical} for i in items],
            }
        )

    @app.route("/api/inventory", methods=["POST"], endpoint="inventory_create")
    @capability_required(Capability.INVENTORY)
    def inventory_create():
        item = _workspace().inventory.create_item(json_body())
        return jsonify({"success": True, "item": item.to_row()})

    @app.route("/api/inventory/movements", methods=["GET"], endpoint="inventory_movements")
    @capability_required(Capability.INVENTORY)
    def inventory_movements():
        snapshot = _workspace().runner.snapshot
        predicate = build_predicate(
            request.args.get("search", ""),
            arg_list("kinds"),
            DateRange.of(arg_date("start"), arg_date("end")),
            text_field="observation",
            category_field="kind",
            date_field="date",
        )
        movements = sorted(apply_filter(snapshot.movements, predicate), key=lambda m: m.date, reverse=True)
        return jsonify({"success": True, "movements": [m.to_row() for m in movements]})

    @app.route("/api/inventory/<item_id>/movements", methods=["POST"], endpoint="inventory_register_movement")
    @capability_required(Capability.INVENTORY)
    def inventory_register_movement(item_id: str):
        data = json_body()
        movement = _workspace().inventory.register_movement(
            item_id,
            data.get("movementType"),
            data.get("quantity"),
            day=arg_date("date"),
            destination=data.get("destination") or "",
            observation=data.get("observation") or "",
        )
        return jsonify({"success": True, "movement": movement.to_row()})

    @app.route("/api/inventory/movements/<movement_id>", methods=["DELETE"], endpoint="inventory_reverse_movement")
    @capability_required(Capability.INVENTORY)
    def inventory_reverse_movement(movement_id: str):
        item = _workspace().inventory.reverse_movement(movement_id)
        return jsonify({"success": True, "item": item.to_row()})

    @app.route("/api/inventory/report.csv", methods=["GET"], endpoint="inventory_report_csv")
    @capability_required(Capability.INVENTORY)
    def inventory_report_csv():
        return csv_response(app, export_inventory(_filtered_items()))
